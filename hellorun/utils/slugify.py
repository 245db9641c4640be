import re
from unidecode import unidecode


def slugify(text):
    text = unidecode(text or "").lower()
    text = re.sub(r'[^a-z0-9]+', '-', text).strip('-')
    return text


def slugify_blog_title(title):
    """
    Derive the base URL slug of a blog post from its title.

    Accented characters are transliterated, anything outside
    ``[a-z0-9 -]`` is dropped, whitespace becomes a hyphen and hyphen runs
    collapse. Returns an empty string when nothing usable remains.
    """
    text = unidecode(str(title or "")).lower().strip()
    text = re.sub(r'[^a-z0-9\s-]', '', text)
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'-+', '-', text)
    return text.strip('-')
