"""Subject lines and bodies for outgoing e-mail."""

from html import escape

PLATFORM_NAME = "MarEye Marine Security Platform"


def otp_email(code: str, name: str | None, ttl_minutes: int) -> tuple[str, str, str]:
    """Return (subject, text, html) for a verification code."""
    # No emoji in the subject, it hurts spam scores
    subject = f"OTP Verification - {PLATFORM_NAME}"
    greeting = f"Hello {name},\n\n" if name else ""
    text = (
        f"{greeting}Your verification code is: {code}\n\n"
        f"This code expires in {ttl_minutes} minutes. "
        "If you did not request this, you can ignore this email."
    )
    html_greeting = f"<p>Hello {escape(name)},</p>" if name else ""
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #06b6d4;">{PLATFORM_NAME}</h1>
  <h2>Email Verification Required</h2>
  {html_greeting}
  <p>Use the code below to verify your email address.</p>
  <div style="font-size: 36px; font-weight: bold; letter-spacing: 8px;
              font-family: 'Courier New', monospace;">{escape(code)}</div>
  <p><strong>Important:</strong> this code expires in {ttl_minutes} minutes.
     If you didn't request this verification, please ignore this email.</p>
</div>
"""
    return subject, text, html


def welcome_email(name: str, dashboard_url: str) -> tuple[str, str, str]:
    """Return (subject, text, html) sent once an account is verified."""
    subject = f"Welcome to {PLATFORM_NAME}!"
    text = (
        f"Hello {name},\n\n"
        "Your account has been verified and activated.\n"
        f"Open your dashboard: {dashboard_url}\n"
    )
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #06b6d4;">Welcome to {PLATFORM_NAME}!</h1>
  <p>Hello {escape(name)},</p>
  <p>Your account has been successfully verified and activated.</p>
  <ul>
    <li>Detect submarines, mines and divers in images and video</li>
    <li>Enhance underwater imagery with our CNN models</li>
    <li>Identify marine species with AI</li>
  </ul>
  <p><a href="{escape(dashboard_url)}">Access your dashboard</a></p>
</div>
"""
    return subject, text, html


def contact_email(
    first_name: str, last_name: str, email: str, institution: str, message: str
) -> tuple[str, str, str]:
    subject = f"Contact Form: {first_name} {last_name} from {institution}"
    text = (
        "NEW CONTACT FORM SUBMISSION\n\n"
        f"Name: {first_name} {last_name}\n"
        f"Email: {email}\n"
        f"Institution: {institution}\n\n"
        f"Message:\n{message}\n\n"
        f"---\nReply directly to this email to respond to {first_name}."
    )
    message_html = escape(message).replace("\n", "<br>")
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #06b6d4;">New Contact Message</h1>
  <p><strong>Name:</strong> {escape(first_name)} {escape(last_name)}</p>
  <p><strong>Email:</strong> <a href="mailto:{escape(email)}">{escape(email)}</a></p>
  <p><strong>Institution:</strong> {escape(institution)}</p>
  <div style="border-left: 4px solid #06b6d4; padding: 15px;">{message_html}</div>
</div>
"""
    return subject, text, html


def data_submission_email(
    name: str,
    email: str,
    institution: str,
    description: str,
    tools: list[tuple[str, str]],
    file_line: str,
) -> tuple[str, str, str]:
    subject = f"Data Submission: {name} ({len(tools)} AI Tools)"
    tools_text = "\n".join(f"- {tool}: {desc}" for tool, desc in tools) or "None"
    text = (
        "NEW DATA SUBMISSION\n\n"
        f"Researcher: {name}\n"
        f"Email: {email}\n"
        f"Institution: {institution}\n\n"
        f"Selected AI Tools:\n{tools_text}\n\n"
        f"Data Description:\n{description}\n\n"
        f"{file_line}\n\n"
        f"---\nReply directly to this email to respond to {name}."
    )
    tools_html = (
        "".join(f"<li><strong>{escape(t)}</strong>: {escape(d)}</li>" for t, d in tools)
        or "<li>No tools selected</li>"
    )
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #06b6d4;">New Data Submission</h1>
  <p><strong>Name:</strong> {escape(name)}</p>
  <p><strong>Email:</strong> <a href="mailto:{escape(email)}">{escape(email)}</a></p>
  <p><strong>Institution:</strong> {escape(institution)}</p>
  <h3>Selected AI Tools</h3>
  <ul>{tools_html}</ul>
  <h3>Data Description</h3>
  <p>{escape(description)}</p>
  <p>{escape(file_line)}</p>
</div>
"""
    return subject, text, html
