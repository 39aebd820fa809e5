"""MarEye marine platform API."""
