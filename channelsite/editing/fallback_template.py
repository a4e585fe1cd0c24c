"""
Fallback Template - Static site used when every LLM provider fails.

The page follows the same structure conventions as generated sites
(header/nav, .hero-section, stats cards, .video-gallery, footer,
.btn-primary), so targeted edits work on it too. All channel text is
HTML-escaped before it is placed in the page.
"""
import html
from dataclasses import dataclass
from datetime import datetime
from string import Template
from typing import Any, Dict, List, Optional

MAX_FALLBACK_VIDEOS = 6

PAGE_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>$title - Official Channel Website</title>
    <style>
        :root {
            --primary: #ff0000;
            --secondary: #666666;
            --background: #ffffff;
            --text: #333333;
            --accent: #667eea;
            --font-family: 'Inter', 'Segoe UI', system-ui, sans-serif;
        }
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: var(--font-family); line-height: 1.6; color: var(--text); background: var(--background); }
        .container { max-width: 1200px; margin: 0 auto; padding: 0 20px; }
        header { background: rgba(255, 255, 255, 0.95); box-shadow: 0 4px 20px rgba(0, 0, 0, 0.1); position: sticky; top: 0; z-index: 100; }
        nav { display: flex; justify-content: space-between; align-items: center; padding: 1rem 0; }
        .logo { font-size: 1.8rem; font-weight: 700; color: var(--accent); }
        .hero-section { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 100px 0; text-align: center; }
        .hero-section h1 { font-size: 3.5rem; margin-bottom: 20px; }
        .hero-section p { font-size: 1.3rem; margin: 0 auto 30px; max-width: 600px; }
        .btn-primary { display: inline-block; background: var(--primary); color: white; padding: 15px 40px; border-radius: 50px; text-decoration: none; font-weight: 600; transition: transform 0.3s ease; }
        .btn-primary:hover { transform: translateY(-3px); }
        .stats { padding: 80px 0; }
        .stats-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(280px, 1fr)); gap: 40px; }
        .stat-card { background: #f5f7fa; padding: 40px; border-radius: 20px; text-align: center; box-shadow: 0 10px 30px rgba(0, 0, 0, 0.1); }
        .stat-number { font-size: 3rem; font-weight: 700; color: var(--accent); display: block; }
        .stat-label { font-size: 1.2rem; color: var(--secondary); }
        .video-gallery { background: #f8f9fa; padding: 80px 0; }
        .section-title { text-align: center; font-size: 2.5rem; margin-bottom: 50px; }
        .videos-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(350px, 1fr)); gap: 30px; }
        .video-card { background: white; border-radius: 15px; overflow: hidden; box-shadow: 0 8px 25px rgba(0, 0, 0, 0.1); }
        .video-thumbnail { position: relative; padding-bottom: 56.25%; height: 0; overflow: hidden; }
        .video-thumbnail iframe { position: absolute; top: 0; left: 0; width: 100%; height: 100%; border: 0; }
        .video-info { padding: 20px; }
        .video-title { font-size: 1.1rem; margin-bottom: 10px; }
        .video-stats { color: var(--secondary); font-size: 0.9rem; }
        footer { background: #2c3e50; color: white; padding: 60px 0 30px; text-align: center; }
        footer p { color: #bdc3c7; margin: 0 auto 20px; max-width: 600px; }
        @media (max-width: 768px) {
            .hero-section h1 { font-size: 2.5rem; }
            .stats-grid, .videos-grid { grid-template-columns: 1fr; }
        }
    </style>
</head>
<body>
    <header>
        <nav class="container">
            <div class="logo">$title</div>
            <a href="#subscribe" class="btn-primary">Subscribe Now</a>
        </nav>
    </header>
    <section class="hero-section">
        <div class="container">
            <h1>$title</h1>
            <p>$description</p>
            <a href="$channel_url" target="_blank" rel="noopener" class="btn-primary" id="subscribe">Subscribe &bull; $subscribers Subscribers</a>
        </div>
    </section>
    <section class="stats">
        <div class="container stats-grid">
            <div class="stat-card"><span class="stat-number">$subscribers</span><div class="stat-label">Subscribers</div></div>
            <div class="stat-card"><span class="stat-number">$videos+</span><div class="stat-label">Videos</div></div>
            <div class="stat-card"><span class="stat-number">$views</span><div class="stat-label">Total Views</div></div>
        </div>
    </section>
$video_section
    <footer>
        <div class="container">
            <h3>$title</h3>
            <p>Request: &quot;$request&quot;</p>
            <p>Thank you for visiting!</p>
            <p>&copy; $year $title. All rights reserved.</p>
        </div>
    </footer>
    <script>
        document.querySelectorAll('a[href^="#"]').forEach(function (anchor) {
            anchor.addEventListener('click', function (e) {
                var target = document.querySelector(this.getAttribute('href'));
                if (target) {
                    e.preventDefault();
                    target.scrollIntoView({ behavior: 'smooth', block: 'start' });
                }
            });
        });
    </script>
</body>
</html>
""")

VIDEO_CARD_TEMPLATE = Template("""                <div class="video-card">
                    <div class="video-thumbnail">
                        <iframe src="$embed_url" title="$title" allowfullscreen></iframe>
                    </div>
                    <div class="video-info">
                        <h3 class="video-title">$title</h3>
                        <div class="video-stats">$views views</div>
                    </div>
                </div>""")


@dataclass
class FallbackResult:
    code: str
    response: str


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def format_count(value: Any) -> str:
    """1234567 -> '1,234,567'"""
    return f"{_as_int(value):,}"


def format_millions(value: Any) -> str:
    """94210000 -> '94.2M'"""
    return f"{_as_int(value) / 1_000_000:.1f}M"


def _video_section(videos: List[Dict[str, Any]]) -> str:
    if not videos:
        return ""

    cards = "\n".join(
        VIDEO_CARD_TEMPLATE.substitute(
            embed_url=html.escape(v.get("embed_url") or f"https://www.youtube.com/embed/{v.get('id', '')}"),
            title=html.escape(v.get("title", "")),
            views=format_count(v.get("view_count")),
        )
        for v in videos[:MAX_FALLBACK_VIDEOS]
    )
    return f"""    <section class="video-gallery">
        <div class="container">
            <h2 class="section-title">Latest Videos</h2>
            <div class="videos-grid">
{cards}
            </div>
        </div>
    </section>"""


def generate_fallback_site(
    user_request: str,
    channel: Optional[Dict[str, Any]] = None
) -> FallbackResult:
    """
    Render the static fallback site for a channel.

    Args:
        user_request: Shown in the footer so the user sees what was asked
        channel: ChannelInfo dict (may be None)
    """
    channel = channel or {}
    custom_url = channel.get("custom_url") or "@channel"

    code = PAGE_TEMPLATE.substitute(
        title=html.escape(channel.get("title") or "Your Channel"),
        description=html.escape(channel.get("description") or "Welcome to our channel"),
        channel_url=html.escape(f"https://www.youtube.com/{custom_url}"),
        subscribers=format_count(channel.get("subscriber_count")),
        videos=format_count(channel.get("video_count")),
        views=format_millions(channel.get("view_count")),
        video_section=_video_section(channel.get("videos") or []),
        request=html.escape(user_request or ""),
        year=datetime.utcnow().year,
    )

    return FallbackResult(
        code=code,
        response=(
            "AI providers are currently unavailable, so a professional template "
            "was generated from your channel data. Try again later for a custom design."
        ),
    )
