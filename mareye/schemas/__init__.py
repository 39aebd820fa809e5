"""Pydantic schemas for API requests and responses."""

from mareye.schemas.auth import AuthResponse, MessageResponse, UserLogin, UserRegister, UserResponse
from mareye.schemas.chatbot import ChatRequest, ChatResponse
from mareye.schemas.contact import ContactForm, ContactResponse, DataSubmission
from mareye.schemas.history import HistoryResponse
from mareye.schemas.otp import SendOTPRequest, VerifyOTPRequest
from mareye.schemas.profile import ProfileResponse
from mareye.schemas.watchlist import WatchlistItemCreate, WatchlistItemResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "SendOTPRequest",
    "VerifyOTPRequest",
    "ProfileResponse",
    "HistoryResponse",
    "WatchlistItemCreate",
    "WatchlistItemResponse",
    "ChatRequest",
    "ChatResponse",
    "ContactForm",
    "DataSubmission",
    "ContactResponse",
]
