"""Portfolio HTML generation from LinkedIn profile data."""
from datetime import date
from html import escape
from typing import Optional
from urllib.parse import quote_plus

from app.services.biography import BiographyComposer
from app.services.linkedin import Profile
from app.utils.exceptions import InvalidProfileError
from app.utils.logger import logger

AVATAR_URL = "https://ui-avatars.com/api/?name={name}&size=200&background=0A66C2&color=fff"

WEBSITE_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name} | Portfolio</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            color: #1f2937;
            background: #f9fafb;
            line-height: 1.6;
        }}
        header {{
            background: linear-gradient(135deg, #0a66c2, #004182);
            color: white;
            padding: 64px 24px;
            text-align: center;
        }}
        header img {{
            width: 160px;
            height: 160px;
            border-radius: 50%;
            border: 4px solid rgba(255, 255, 255, 0.8);
            object-fit: cover;
            margin-bottom: 16px;
        }}
        header h1 {{ font-size: 2.5rem; font-weight: 700; }}
        main {{ max-width: 760px; margin: 0 auto; padding: 48px 24px; }}
        section {{
            background: white;
            border-radius: 12px;
            box-shadow: 0 4px 6px rgba(0, 0, 0, 0.05);
            padding: 32px;
            margin-bottom: 24px;
        }}
        section h2 {{ font-size: 1.5rem; margin-bottom: 12px; color: #0a66c2; }}
        a {{ color: #0a66c2; }}
        footer {{ text-align: center; padding: 24px; color: #6b7280; font-size: 0.875rem; }}
    </style>
</head>
<body>
    <header>
        <img src="{picture}" alt="{name}">
        <h1>{name}</h1>
    </header>
    <main>
        <section id="about">
            <h2>About Me</h2>
            <p>{biography}</p>
        </section>
{contact_section}    </main>
    <footer>&copy; {year} {name}. All rights reserved.</footer>
</body>
</html>
"""

CONTACT_SECTION_TEMPLATE = """        <section id="contact">
            <h2>Contact</h2>
            <p>Get in touch: <a href="mailto:{email}">{email}</a></p>
        </section>
"""


def avatar_url(name: str) -> str:
    """Generated avatar for profiles without a picture."""
    return AVATAR_URL.format(name=quote_plus(name))


class ContentGenerator:
    """Builds the static portfolio document."""

    def __init__(self, composer: BiographyComposer):
        self.composer = composer

    async def render(self, profile: Profile, today: Optional[date] = None) -> str:
        """
        Render the portfolio HTML for a profile.

        Args:
            profile: Normalized LinkedIn profile
            today: Date used for the footer year

        Returns:
            Complete HTML document

        Raises:
            InvalidProfileError: If the profile has no display name
        """
        name = (profile.name or "").strip()
        if not name:
            raise InvalidProfileError("Cannot generate a website without a display name")

        biography = await self.composer.compose(profile)
        today = today or date.today()

        contact_section = ""
        if profile.email:
            contact_section = CONTACT_SECTION_TEMPLATE.format(email=escape(profile.email))

        logger.debug(f"[CONTENT] Rendering website for {profile.id}")
        return WEBSITE_HTML_TEMPLATE.format(
            name=escape(name),
            picture=escape(profile.picture or avatar_url(name)),
            biography=escape(biography),
            contact_section=contact_section,
            year=today.year,
        )
