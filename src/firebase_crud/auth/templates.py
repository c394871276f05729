from __future__ import annotations

import html


def render_email_verification(url: str, *, app_name: str) -> str:
    link = html.escape(url, quote=True)
    name = html.escape(app_name)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Email Verification - {name}</title>
</head>
<body>
    <div style="background-color: #f3f4f6; padding: 20px;">
        <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 4px 8px rgba(0, 0, 0, 0.1);">
            <h1 style="color: #333333; font-size: 24px; font-weight: bold; margin-bottom: 20px;">Verify Your Email Address</h1>
            <p style="color: #666666; font-size: 16px; margin-bottom: 30px;">Thank you for signing up for {name}! To complete your registration, please verify your email address by clicking the button below:</p>
            <a href="{link}" style="display: inline-block; background-color: #007bff; color: #ffffff; text-decoration: none; padding: 12px 24px; border-radius: 4px; font-size: 16px; font-weight: bold;">Verify Email Address</a>
            <p style="color: #666666; font-size: 14px; margin-top: 30px;">If you did not sign up for an account on {name}, you can safely ignore this email.</p>
        </div>
    </div>
</body>
</html>
"""
