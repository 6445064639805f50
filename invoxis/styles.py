from __future__ import annotations

"""
Shared Tailwind class strings for the pages.

Keep long class lists here instead of repeating them per page.
"""

C_FONT_STACK = '"Inter", system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif'
C_NUMERIC = "tabular-nums"

APP_FONT_CSS = f"""
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" rel="stylesheet">
<style>
  :root, body, .q-body {{
    font-family: {C_FONT_STACK};
    letter-spacing: -0.01em;
  }}
  .invoice-preview table td, .invoice-preview table th {{
    padding: 4px 6px;
  }}
  .q-card, .q-btn {{
    box-shadow: none !important;
  }}
</style>
"""

C_CONTAINER = "w-full max-w-6xl mx-auto px-4 py-6 gap-6"
C_CARD = "w-full rounded-xl border border-slate-200 dark:border-slate-700 p-6"
C_SECTION_TITLE = "text-lg font-semibold mb-2"
C_PAGE_TITLE = "text-2xl font-semibold"
C_INPUT = "w-full"
C_ERROR_TEXT = "text-xs text-rose-600"
C_MUTED_TEXT = "text-sm text-slate-500"
C_BTN_PRIM = "rounded-lg px-4"
C_BTN_SEC = "rounded-lg px-4"
C_TOTAL_ROW = f"w-full justify-between {C_NUMERIC}"
