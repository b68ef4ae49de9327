from domain.models.valuation import BadgeData

from .sanitize import escape_xml, format_number

BADGE_WIDTH = 280
BAR_WIDTH = 200

COLOR_LOW = "#44cc11"
COLOR_MEDIUM = "#dfb317"
COLOR_HIGH = "#e05d44"


def usage_color(usage_rate: float) -> str:
    if usage_rate > 70:
        return COLOR_HIGH
    if usage_rate > 40:
        return COLOR_MEDIUM
    return COLOR_LOW


def build_badge_svg(badge: BadgeData, title: str = "VPS Remaining Value") -> str:
    height = 140 if badge.source else 120
    usage = f"{badge.usage_rate:.1f}"
    # static-mode input can put usage outside 0-100; keep the bar drawable
    bar_width = max(0.0, min(float(BAR_WIDTH), badge.usage_rate * 2))
    safe_title = escape_xml(title)

    source_line = ""
    if badge.source:
        source_line = f"""

  <!-- source -->
  <text x="140" y="128" font-family="Arial, sans-serif" font-size="9" fill="white" text-anchor="middle" opacity="0.7">
    Source: {escape_xml(badge.source)}
  </text>"""

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{BADGE_WIDTH}" height="{height}" role="img" aria-label="{safe_title}">
  <title>{safe_title}</title>
  <defs>
    <linearGradient id="grad" x1="0%" y1="0%" x2="0%" y2="100%">
      <stop offset="0%" style="stop-color:#667eea;stop-opacity:1" />
      <stop offset="100%" style="stop-color:#764ba2;stop-opacity:1" />
    </linearGradient>
  </defs>

  <!-- background -->
  <rect width="{BADGE_WIDTH}" height="{height}" rx="8" fill="url(#grad)"/>

  <!-- title -->
  <text x="140" y="25" font-family="Arial, sans-serif" font-size="14" font-weight="bold" fill="white" text-anchor="middle">
    {safe_title}
  </text>

  <!-- date range -->
  <text x="140" y="45" font-family="Arial, sans-serif" font-size="11" fill="white" text-anchor="middle" opacity="0.9">
    {escape_xml(badge.start_date)} to {escape_xml(badge.end_date)}
  </text>

  <!-- remaining value -->
  <text x="140" y="75" font-family="Arial, sans-serif" font-size="24" font-weight="bold" fill="white" text-anchor="middle">
    {escape_xml(badge.symbol)}{badge.remaining_value:.2f}
  </text>

  <!-- usage -->
  <rect x="40" y="90" width="{BAR_WIDTH}" height="20" rx="10" fill="white" opacity="0.3"/>
  <rect x="40" y="90" width="{format_number(round(bar_width, 2))}" height="20" rx="10" fill="{usage_color(badge.usage_rate)}"/>
  <text x="140" y="104" font-family="Arial, sans-serif" font-size="11" font-weight="bold" fill="white" text-anchor="middle">
    Used {usage}%
  </text>{source_line}
</svg>"""
