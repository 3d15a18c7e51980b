"""HTML bodies for account emails."""

from html import escape

VERIFICATION_SUBJECT = "Verify your account"
PASSWORD_RESET_SUBJECT = "Reset Password"


def _layout(title: str, intro: str, button_label: str, action_url: str, footer: str) -> str:
    url = escape(action_url, quote=True)
    return f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <div style="background-color: #191c21; padding: 30px; border-radius: 10px; text-align: center;">
                    <h1 style="color: #93c5fd; margin: 0;">Meetmax</h1>
                </div>

                <div style="padding: 30px 0;">
                    <h2 style="color: #1e293b; margin-bottom: 20px;">{title}</h2>

                    <p style="color: #475569; line-height: 1.6; margin-bottom: 20px;">{intro}</p>

                    <div style="text-align: center; margin: 30px 0;">
                        <a href="{url}"
                           style="background-color: #1a82e2; color: white; padding: 15px 30px;
                                  text-decoration: none; border-radius: 5px; display: inline-block;
                                  font-weight: bold;">
                            {button_label}
                        </a>
                    </div>

                    <p style="color: #64748b; font-size: 14px;">
                        If that doesn't work, copy and paste the following link in your browser:
                    </p>
                    <p style="color: #64748b; font-size: 14px;"><a href="{url}">{url}</a></p>

                    <p style="color: #64748b; font-size: 14px; margin-top: 30px;">{footer}</p>
                </div>
            </body>
        </html>
        """


def render_verification_email(action_url: str, expires_minutes: int) -> str:
    return _layout(
        title="Confirm Your Email Address",
        intro="Tap the button below to confirm your email address and activate your account.",
        button_label="Verify Email",
        action_url=action_url,
        footer=(
            f"This link expires in {expires_minutes} minutes. "
            "If you didn't create an account with Meetmax, you can safely delete this email."
        ),
    )


def render_password_reset_email(action_url: str, expires_minutes: int) -> str:
    return _layout(
        title="Reset Your Password",
        intro="We received a request to reset the password for your account. Tap the button below to choose a new one.",
        button_label="Set New Password",
        action_url=action_url,
        footer=(
            f"This link expires in {expires_minutes} minutes. "
            "If you didn't request a password reset, you can safely delete this email."
        ),
    )
