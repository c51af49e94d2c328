"""HTML wrapper shared by every outgoing code email."""

import re

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Your OTP Code</title>
    <style>
        body { font-family: Arial, sans-serif; background-color: #f4f4f4; margin: 0; padding: 20px; }
        .container { max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 20px; border-radius: 5px; }
        .header { text-align: center; font-size: 24px; margin-bottom: 20px; }
        .otp { font-size: 32px; text-align: center; margin: 20px 0; padding: 10px; background-color: #e0e0e0; border-radius: 5px; }
        .footer { text-align: center; font-size: 12px; color: #888888; margin-top: 20px; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">Your OTP Code</div>
        <div class="otp">{body}</div>
        <p>The code is valid for the next 10 minutes.</p>
        <p>If you did not request this code, please ignore this email.</p>
        <div class="footer">&copy; {sender_name}</div>
    </div>
</body>
</html>"""

_PLACEHOLDER = re.compile(r"\{(body|sender_name)\}")


def render_email(body: str, sender_name: str) -> str:
    """Place an HTML fragment inside the code email template."""
    # Single pass, not str.format: the stylesheet contains braces and
    # substituted values must not be scanned for placeholders.
    values = {"body": body, "sender_name": sender_name}
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], TEMPLATE)
