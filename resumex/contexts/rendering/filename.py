"""Export file names derived from the profile."""

import re
from datetime import date
from typing import Optional

from resumex.contexts.document.model import ResumeProfile
from resumex.utils.timestamp import locale_date

ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def generate_export_filename(profile: ResumeProfile, format: str, day: Optional[date] = None) -> str:
    """
    Build the download name for an exported résumé.

    - name and title: "{name}_{title}_简历.{format}"
    - name only: "{name}_简历.{format}"
    - otherwise: "简历_{date}.{format}" (zh-CN date, hyphen separated)

    Characters illegal in file names are replaced with "_" before the
    extension is appended.

    Args:
        profile: Profile supplying name and title
        format: Extension without the dot ("png", "pdf", "docx")
        day: Date used when the name is blank (default: today)

    Returns:
        File name such as "李明_工程师_简历.pdf"
    """
    name = (profile.name or "").strip()
    title = (profile.title or "").strip()

    if name and title:
        base = f"{name}_{title}_简历"
    elif name:
        base = f"{name}_简历"
    else:
        base = f"简历_{locale_date(day)}"

    return f"{ILLEGAL_FILENAME_CHARS.sub('_', base)}.{format}"
