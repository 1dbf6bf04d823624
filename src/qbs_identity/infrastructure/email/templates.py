"""Plain-text and HTML bodies for transactional emails."""

_HTML_SHELL = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        {content}
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">{footer}</p>
            <p style="color: #9ca3af; font-size: 13px; margin-top: 8px;">QB Securiegnty</p>
        </div>
    </div>
</body>
</html>
"""

_BUTTON = """
        <p style="margin: 30px 0; text-align: center;">
            <a href="{link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 16px;">{label}</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{link}</p>
"""

WELCOME_SUBJECT = "Welcome to QB Securiegnty!"

WELCOME_TEXT = """Hello {name},

Thanks for creating your QB Securiegnty account.

Please confirm your email address (valid for 24 hours):
{verification_link}

-- QB Securiegnty
"""

WELCOME_CONTENT = """
        <h2 style="color: #111827; margin-top: 0;">Welcome, {name}!</h2>
        <p style="color: #374151; line-height: 1.6;">Thanks for creating your QB Securiegnty account.</p>
        <p style="color: #374151; line-height: 1.6;">Please confirm your email address to activate it. This link is valid for 24 hours.</p>
"""

VERIFICATION_SUBJECT = "Confirm your email address | QB Securiegnty"

VERIFICATION_TEXT = """Hello {name},

Use the link below to confirm your email address (valid for 24 hours):
{verification_link}

If you didn't request this, you can safely ignore this email.

-- QB Securiegnty
"""

VERIFICATION_CONTENT = """
        <h2 style="color: #111827; margin-top: 0;">Confirm your email address</h2>
        <p style="color: #374151; line-height: 1.6;">Hello {name}, use the button below to confirm your email address. This link is valid for 24 hours.</p>
"""

PASSWORD_RESET_SUBJECT = "Password Reset Request | QB Securiegnty"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your QB Securiegnty account.

Click the link below to reset your password (valid for 1 hour):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- QB Securiegnty
"""

PASSWORD_RESET_CONTENT = """
        <h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #374151; line-height: 1.6;">You requested a password reset for your QB Securiegnty account.</p>
        <p style="color: #374151; line-height: 1.6;">Click the button below to reset your password. This link is valid for 1 hour.</p>
"""

IGNORE_FOOTER = "If you didn't request this, you can safely ignore this email."


def render_html(content: str, link: str, label: str, footer: str = IGNORE_FOOTER) -> str:
    return _HTML_SHELL.format(
        content=content + _BUTTON.format(link=link, label=label),
        footer=footer,
    )
