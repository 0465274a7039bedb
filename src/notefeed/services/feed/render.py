"""HTML rendering of a feed page.

The page layout lives in a Jinja2 template (``templates/feed.html.j2``)
rendered with autoescaping. Post content is turned into markup by
[format_content()][notefeed.services.feed.render.format_content], which
scans the **raw** text once and escapes every piece it emits:

* ``http(s)`` URLs become links; YouTube links become embeds, image URLs
  inline images, and video URLs click-to-play placeholders.
* NIP-19 identifiers become gateway links: ``npub``/``nprofile`` labelled
  ``@name``, ``note``/``nevent`` labelled ``[event:...]``, others
  ``[nostr:...]``.
* Newlines become ``<br>``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape

from notefeed.nips.nip19 import NIP19_PATTERN, Nip19Prefix, decode_pubkey, prefix_of, shorten


if TYPE_CHECKING:
    from collections.abc import Iterable

    from .configs import PageConfig
    from .projection import AuthorView, FeedPage, ParentView, PostView


TEMPLATE_NAME = "feed.html.j2"

_TOKEN_PATTERN = re.compile(rf"(?P<url>https?://[^\s<>\"']+)|{NIP19_PATTERN.pattern}")
_YOUTUBE_PATTERN = re.compile(
    r"^https?://(?:www\.|m\.)?(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/)([A-Za-z0-9_-]{11})"
)
_URL_TRAILING = ".,;:!?"

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg")

_LINK = Markup('<a href="{0}" target="_blank" rel="noopener">{1}</a>')
_IMAGE = Markup(
    '<a href="{0}" target="_blank" rel="noopener">'
    '<img src="{0}" class="post-image" loading="lazy" alt=""></a>'
)
_VIDEO = Markup(
    '<div class="video-container" data-video-src="{0}" role="button" tabindex="0">'
    '<div class="play-icon"><svg viewBox="0 0 24 24" fill="currentColor">'
    '<path d="M8 5v14l11-7z"/></svg></div>'
    '<span class="video-label">Play Video</span></div>'
)
_YOUTUBE = Markup(
    '<div class="youtube-embed">'
    '<iframe src="https://www.youtube.com/embed/{0}" frameborder="0" allowfullscreen></iframe>'
    "</div>"
)


def _text(segment: str) -> Markup:
    lines = segment.replace("\r\n", "\n").split("\n")
    return Markup("<br>").join(escape(line) for line in lines)


def _url(url: str) -> Markup:
    youtube = _YOUTUBE_PATTERN.match(url)
    if youtube:
        return _YOUTUBE.format(youtube.group(1))
    path = urlsplit(url).path.lower()
    if path.endswith(VIDEO_EXTENSIONS):
        return _VIDEO.format(url)
    if path.endswith(IMAGE_EXTENSIONS):
        return _IMAGE.format(url)
    return _LINK.format(url, url)


def _identifier(identifier: str, link_base: str, mentions: dict[str, AuthorView]) -> Markup:
    prefix = prefix_of(identifier)
    short = shorten(identifier)
    href = f"{link_base}/{identifier}"

    if prefix in (Nip19Prefix.NPUB, Nip19Prefix.NPROFILE):
        label = short
        pubkey = decode_pubkey(identifier)
        view = mentions.get(pubkey) if pubkey else None
        if view is not None and view.has_profile:
            label = view.name
        return _LINK.format(href, f"@{label}")
    if prefix in (Nip19Prefix.NOTE, Nip19Prefix.NEVENT):
        return _LINK.format(href, f"[event:{short}]")
    return _LINK.format(href, f"[nostr:{short}]")


def format_content(
    content: str,
    link_base: str,
    mentions: Iterable[AuthorView] = (),
) -> Markup:
    """Convert raw post *content* into safe HTML.

    Args:
        content: Untrusted post text.
        link_base: Gateway prefix for identifier links.
        mentions: Author views used to label ``npub``/``nprofile`` mentions.

    Returns:
        Escaped markup ready to embed in the template.
    """
    by_key = {view.pubkey: view for view in mentions}
    link_base = link_base.rstrip("/")

    parts: list[Markup] = []
    cursor = 0
    for match in _TOKEN_PATTERN.finditer(content):
        start, end = match.span()
        url = match.group("url")
        trailing = ""
        if url is not None:
            stripped = url.rstrip(_URL_TRAILING)
            trailing = url[len(stripped) :]
            url = stripped

        parts.append(_text(content[cursor:start]))
        if url is not None:
            parts.append(_url(url))
            parts.append(_text(trailing))
        else:
            parts.append(_identifier(match.group("identifier"), link_base, by_key))
        cursor = end
    parts.append(_text(content[cursor:]))
    return Markup("").join(parts)


def _content_html(view: PostView | ParentView, link_base: str) -> Markup:
    return format_content(view.content, link_base, view.mentions)


TIMESTAMP_PLACEHOLDER = "unknown date"


def _timestamp(view: PostView) -> str:
    if view.created_at is None:
        return TIMESTAMP_PLACEHOLDER
    return view.created_at.strftime("%Y-%m-%d %H:%M UTC")


def create_environment() -> Environment:
    """Build the Jinja2 environment with the feed filters registered."""
    env = Environment(
        loader=PackageLoader("notefeed.services.feed", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["content_html"] = _content_html
    env.filters["timestamp"] = _timestamp
    return env


_ENV = create_environment()


def render_page(page: FeedPage, config: PageConfig, handle: str | None = None) -> str:
    """Render a full HTML document for *page*."""
    return _ENV.get_template(TEMPLATE_NAME).render(
        feed=page,
        title=config.title,
        home_url=config.home_url,
        link_base=config.link_base,
        handle=handle,
    )


def render_not_found(config: PageConfig, message: str) -> str:
    """Render the error document shown when the author cannot be resolved."""
    return _ENV.get_template(TEMPLATE_NAME).render(
        feed=None,
        title=config.title,
        home_url=config.home_url,
        link_base=config.link_base,
        error=message,
    )
