"""
Idea submission email rendering.

Builds the subject line plus HTML and plain-text bodies for one submission.
The submission markdown is escaped first, then headings, emphasis and bullet
lists are turned into inline-styled HTML that survives mail clients.
"""

import html
import re
from datetime import datetime
from typing import Optional, Sequence

from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from ..schemas.catalog import CATEGORY_CATALOG, CategoryCatalog
from .base import MailMessage


ACCENT = "#9bc53d"
TEXT_LIGHT = "#f0f4f8"
TEXT_MUTED = "#94a3b8"
TEXT_DIM = "#64748b"

_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))

EMAIL_TEMPLATE = _env.from_string("""
<div style="font-family:'Segoe UI',Arial,sans-serif;max-width:700px;margin:0 auto;background:#1a2332;border-radius:12px;overflow:hidden;border:1px solid rgba(155,197,61,0.2);">
  <div style="background:#2b3e50;padding:24px 32px;border-bottom:3px solid {{ accent }};">
    <table style="width:100%;">
      <tr>
        <td>
          <span style="font-size:28px;font-weight:800;color:{{ accent }};letter-spacing:-0.5px;">CMG</span>
          <br>
          <span style="font-size:11px;font-weight:600;color:{{ dim }};letter-spacing:1px;text-transform:uppercase;">Financial</span>
        </td>
        <td style="text-align:right;">
          <span style="font-size:18px;font-weight:700;color:{{ light }};">TellCMG</span>
          <br>
          <span style="font-size:11px;color:{{ dim }};">Idea Submission</span>
        </td>
      </tr>
    </table>
  </div>
  <div style="padding:20px 32px;background:#1f2b3d;border-bottom:1px solid rgba(148,163,184,0.1);">
    {% if submitter %}<p style="font-size:14px;color:{{ dim }};margin:0 0 4px 0;">Submitted by: <strong style="color:{{ light }};">{{ submitter }}</strong></p>{% endif %}
    <p style="font-size:14px;color:{{ dim }};margin:0 0 4px 0;">Category: <strong style="color:{{ accent }};">{{ categories }}</strong></p>
    <p style="font-size:12px;color:{{ dim }};margin:0;">Submitted: {{ submitted_at }}</p>
  </div>
  <div style="padding:28px 32px;">
    <p style="color:{{ muted }};line-height:1.7;margin:0 0 10px 0;">
      {{ body }}
    </p>
  </div>
  <div style="padding:16px 32px;background:#1f2b3d;border-top:1px solid rgba(148,163,184,0.1);text-align:center;">
    <p style="font-size:11px;color:{{ dim }};margin:0;">
      Submitted via <strong style="color:{{ accent }};">TellCMG</strong> &mdash; Voice Your Ideas
    </p>
  </div>
</div>
""")


def markdown_to_email_html(document: str) -> Markup:
    """Convert the submission's markdown subset into inline-styled HTML."""
    out = html.escape(document, quote=False)
    out = re.sub(
        r"^### (.+)$",
        rf'<h3 style="color:{ACCENT};font-size:16px;margin:16px 0 8px 0;font-weight:600;">\1</h3>',
        out, flags=re.M,
    )
    out = re.sub(
        r"^## (.+)$",
        rf'<h2 style="color:{ACCENT};font-size:18px;margin:20px 0 10px 0;font-weight:700;'
        rf'border-bottom:1px solid rgba(155,197,61,0.3);padding-bottom:6px;">\1</h2>',
        out, flags=re.M,
    )
    out = re.sub(
        r"^# (.+)$",
        rf'<h1 style="color:{TEXT_LIGHT};font-size:22px;margin:0 0 16px 0;font-weight:800;">\1</h1>',
        out, flags=re.M,
    )
    out = re.sub(r"\*\*(.+?)\*\*", rf'<strong style="color:{TEXT_LIGHT};">\1</strong>', out)
    out = re.sub(r"\*(.+?)\*", r"<em>\1</em>", out)
    out = re.sub(r"^- (.+)$", rf'<li style="margin:4px 0;color:{TEXT_MUTED};">\1</li>', out, flags=re.M)
    out = re.sub(
        r"(?:<li.*</li>\n?)+",
        lambda m: f'<ul style="padding-left:20px;margin:8px 0;">{m.group(0)}</ul>',
        out,
    )
    out = out.replace("\n\n", f'</p><p style="color:{TEXT_MUTED};line-height:1.7;margin:10px 0;">')
    out = out.replace("\n", "<br>")
    return Markup(out)


class IdeaEmailFormatter:
    """Renders one idea submission as a MailMessage."""

    def __init__(self, categories: CategoryCatalog = CATEGORY_CATALOG):
        self.categories = categories

    def category_list(self, category_ids: Sequence[str]) -> str:
        if not category_ids:
            return "General"
        return ", ".join(self.categories.label_of(c) for c in category_ids)

    def subject(self, category_ids: Sequence[str], submitter: Optional[str] = None) -> str:
        sender = f" from {submitter}" if submitter else ""
        return f"TellCMG Idea Submission{sender} — {self.category_list(category_ids)}"

    def plain_text(
        self,
        document: str,
        category_ids: Sequence[str],
        submitter: Optional[str],
        submitted_at: datetime,
    ) -> str:
        lines = ["TellCMG Idea Submission", ""]
        if submitter:
            lines.append(f"From: {submitter}")
        lines.append(f"Category: {self.category_list(category_ids)}")
        lines.append(f"Date: {submitted_at.strftime('%m/%d/%Y, %I:%M:%S %p')}")
        lines.append("")
        lines.append(document)
        return "\n".join(lines)

    def html(
        self,
        document: str,
        category_ids: Sequence[str],
        submitter: Optional[str],
        submitted_at: datetime,
    ) -> str:
        return EMAIL_TEMPLATE.render(
            accent=ACCENT,
            light=TEXT_LIGHT,
            muted=TEXT_MUTED,
            dim=TEXT_DIM,
            submitter=submitter,
            categories=self.category_list(category_ids),
            submitted_at=submitted_at.strftime("%A, %B %d, %Y at %I:%M %p"),
            body=markdown_to_email_html(document),
        )

    def format(
        self,
        document: str,
        category_ids: Sequence[str],
        recipient: str,
        submitter: Optional[str] = None,
        submitted_at: Optional[datetime] = None,
    ) -> MailMessage:
        when = submitted_at or datetime.now()
        return MailMessage(
            to=recipient,
            subject=self.subject(category_ids, submitter),
            text=self.plain_text(document, category_ids, submitter, when),
            html=self.html(document, category_ids, submitter, when),
            reply_to=submitter,
        )
