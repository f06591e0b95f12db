"""HTML report generator — one self-contained page for the whole run."""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path

from .view_model import CheckView, NodeView, ReportViewModel, TestSectionView, ViolationView

logger = logging.getLogger(__name__)


def _status_icon(failed: bool) -> str:
    if failed:
        return '<span class="check-icon fail-icon">&#10007;</span>'
    return '<span class="check-icon pass-icon">&#10003;</span>'


def _build_node(node: NodeView) -> str:
    fixes = ""
    for fix in node.fix_summaries:
        items = "".join(f"<li>{html.escape(item)}</li>" for item in fix.items if item.strip())
        fixes += f'''
          <div class="fix-summary">
            <div class="fix-highlight">{html.escape(fix.highlight)}</div>
            {f"<ul>{items}</ul>" if items else ""}
          </div>'''

    return f'''
      <div class="node">
        <div class="node-target"><span class="node-index">{node.index}</span> <code>{html.escape(node.target_nodes)}</code></div>
        <pre class="node-html">{html.escape(node.html)}</pre>
        {fixes}
      </div>'''


def _build_violation(v: ViolationView) -> str:
    nodes = "".join(_build_node(n) for n in v.nodes)
    help_link = html.escape(v.help)
    if v.help_url:
        help_link = f'<a href="{html.escape(v.help_url)}" target="_blank" rel="noopener">{help_link}</a>'

    return f'''
    <div class="violation">
      <div class="violation-header">
        <span class="badge {html.escape(v.impact)}">{html.escape(v.impact)}</span>
        <strong>{html.escape(v.id)}</strong>
        <span class="violation-help">{help_link}</span>
      </div>
      <div class="violation-description">{html.escape(v.description)}</div>
      {f"<div class='violation-wcag'>Tags: {html.escape(v.wcag)}</div>" if v.wcag else ""}
      <div class="nodes">{nodes}</div>
    </div>'''


def _build_check_row(check: CheckView) -> str:
    row_class = "check-fail" if check.failed else "check-pass"
    context = ""
    if check.context:
        context = f'<code class="check-context">{html.escape(json.dumps(check.context))}</code>'
    return f'''
      <div class="check-row {row_class}">
        {_status_icon(check.failed)}
        <span class="check-name">{html.escape(check.name)}</span>
        {context}
      </div>'''


def _build_test_section(t: TestSectionView) -> str:
    """Build the section for a single test."""
    section = f'''
  <section class="test" id="{html.escape(t.anchor_id)}">
    <h2>{html.escape(t.name)}</h2>
    <p class="meta">{html.escape(t.url)} &middot; {html.escape(t.violations_summary)}</p>
    '''

    if t.fail_message:
        section += f'<div class="failure-banner"><strong>Failure:</strong> {html.escape(t.fail_message)}</div>'

    if t.checks:
        section += '<div class="section"><h4>Checks</h4>'
        section += "".join(_build_check_row(c) for c in t.checks)
        section += '</div>'

    if t.violations:
        section += '<div class="section"><h4>Violations</h4>'
        section += "".join(_build_violation(v) for v in t.violations)
        section += '</div>'

    section += '</section>'
    return section


def render_html_report(view_model: ReportViewModel) -> str:
    toc = "".join(
        f'<li><a href="#{html.escape(t.anchor_id)}">{html.escape(t.name)}</a> '
        f'<span class="toc-count">{html.escape(t.violations_summary)}</span></li>'
        for t in view_model.tests
    )
    sections = "".join(_build_test_section(t) for t in view_model.tests)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Accessibility Report</title>
<style>
  :root {{ --pass: #22c55e; --fail: #ef4444; --bg: #f8fafc; --card: white; --border: #e2e8f0; --text: #1e293b; --muted: #64748b; --accent: #6366f1; }}
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--text); line-height: 1.6; padding: 1.5rem; }}
  .container {{ max-width: 1200px; margin: 0 auto; }}
  h1 {{ font-size: 1.8rem; margin-bottom: 0.3rem; }}
  h2 {{ font-size: 1.2rem; }}
  .meta {{ color: var(--muted); margin-bottom: 1rem; font-size: 0.9rem; }}
  .toc {{ background: var(--card); border-radius: 8px; padding: 1rem 1.2rem; margin-bottom: 1.5rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); }}
  .toc ul {{ margin-left: 1.2rem; font-size: 0.9rem; }}
  .toc-count {{ color: var(--muted); font-size: 0.8rem; }}
  .test {{ background: var(--card); border-radius: 8px; padding: 1rem 1.2rem; margin-bottom: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); }}
  .failure-banner {{ background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; border-radius: 6px; padding: 0.6rem 0.8rem; margin-bottom: 0.8rem; font-size: 0.88rem; }}
  .section {{ margin-bottom: 1rem; }}
  .section h4 {{ font-size: 0.85rem; color: var(--muted); text-transform: uppercase; letter-spacing: 0.05em; margin-bottom: 0.4rem; padding-bottom: 0.25rem; border-bottom: 1px solid var(--border); }}
  /* Badges */
  .badge {{ display: inline-block; padding: 0.15rem 0.55rem; border-radius: 9999px; font-size: 0.7rem; font-weight: 600; text-transform: uppercase; white-space: nowrap; background: #f1f5f9; color: var(--muted); }}
  .badge.critical {{ background: #fecaca; color: #991b1b; }}
  .badge.serious {{ background: #fed7aa; color: #9a3412; }}
  .badge.moderate {{ background: #fef9c3; color: #854d0e; }}
  .badge.minor {{ background: #dbeafe; color: #1e40af; }}
  /* Checks */
  .check-row {{ display: flex; align-items: flex-start; gap: 0.5rem; padding: 0.35rem 0; border-bottom: 1px solid #f1f5f9; font-size: 0.85rem; }}
  .check-fail {{ background: #fef8f8; }}
  .check-icon {{ width: 18px; height: 18px; display: inline-flex; align-items: center; justify-content: center; border-radius: 50%; font-size: 0.7rem; flex-shrink: 0; margin-top: 2px; }}
  .pass-icon {{ background: #dcfce7; color: #166534; }}
  .fail-icon {{ background: #fecaca; color: #991b1b; }}
  .check-context {{ color: var(--muted); font-size: 0.78rem; }}
  /* Violations */
  .violation {{ border: 1px solid var(--border); border-radius: 6px; padding: 0.7rem; margin-bottom: 0.6rem; }}
  .violation-header {{ display: flex; align-items: center; gap: 0.5rem; flex-wrap: wrap; }}
  .violation-description, .violation-wcag {{ color: var(--muted); font-size: 0.85rem; margin: 0.3rem 0; }}
  .node {{ border-top: 1px solid #f1f5f9; padding: 0.5rem 0; font-size: 0.85rem; }}
  .node-index {{ font-weight: 600; color: var(--accent); }}
  .node-html {{ background: #1e293b; color: #f1f5f9; padding: 0.6rem; border-radius: 6px; font-size: 0.78rem; overflow-x: auto; margin: 0.3rem 0; white-space: pre-wrap; }}
  .fix-highlight {{ font-weight: 600; }}
  .fix-summary ul {{ margin-left: 1.2rem; }}
</style>
</head>
<body>
<div class="container">
  <h1>Accessibility Report</h1>
  <p class="meta">{len(view_model.tests)} tests &middot; {view_model.total_violations} violations</p>

  <nav class="toc"><ul>{toc}</ul></nav>

  {sections}
</div>
</body>
</html>'''


def generate_html_report(view_model: ReportViewModel, output_path: Path) -> None:
    """Write the rendered report to ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_html_report(view_model))
    logger.debug("Wrote HTML report with %d tests to %s", len(view_model.tests), output_path)
