"""Server-rendered dashboard page."""

from html import escape

from meal_dashboard.domain.meals import MealPeriod
from meal_dashboard.services.view import (
    GRAND_TOTAL_KEY,
    device_count_key,
    manual_input_key,
    meal_total_key,
    submit_button_key,
    timestamp_key,
    total_key,
)


def render_dashboard(snapshot: dict[str, object], devices: list[str]) -> str:
    """Render the view snapshot as a complete HTML document."""
    text: dict[str, str] = snapshot.get("text", {})  # type: ignore[assignment]
    inputs: dict[str, dict[str, object]] = snapshot.get("inputs", {})  # type: ignore[assignment]
    buttons: dict[str, dict[str, object]] = snapshot.get("buttons", {})  # type: ignore[assignment]
    active = snapshot.get("active_period")

    cards = []
    for card in snapshot.get("cards", []):  # type: ignore[union-attr]
        period = MealPeriod(card["period"])
        rows = []
        for device in devices:
            row_class = "row active" if active == str(period) else "row"
            cells = [f'<span class="{period}">{escape(device)}</span>']
            count_key = device_count_key(device, period)
            if count_key in text:
                cells.append(_text_node("b", "device-count", count_key, text))
            input_key = manual_input_key(device, period)
            if input_key in inputs:
                cells.append(
                    f'<input class="inline-input" data-key="{escape(input_key)}" '
                    f'data-device="{escape(device)}" data-meal="{period}" '
                    f'value="{escape(str(inputs[input_key]["value"]))}" />'
                )
            button_key = submit_button_key(device, period)
            if button_key in buttons:
                button = buttons[button_key]
                disabled = " disabled" if button["disabled"] else ""
                cells.append(
                    f'<button data-key="{escape(button_key)}" '
                    f'data-device="{escape(device)}" data-meal="{period}"'
                    f"{disabled}>{escape(str(button['label']))}</button>"
                )
            rows.append(
                f'<div class="{row_class}" data-meal="{period}">{"".join(cells)}</div>'
            )
        card_class = "card inactive" if card["inactive"] else "card"
        footer = []
        if meal_total_key(period) in text:
            footer.append(_text_node("b", "meal-total", meal_total_key(period), text))
        if timestamp_key(period) in text:
            footer.append(_text_node("p", "timestamp", timestamp_key(period), text))
        cards.append(
            f'<section class="{card_class}" data-meal="{period}">'
            f"<h2>{period.capitalize()}</h2>{''.join(rows)}{''.join(footer)}</section>"
        )

    totals = []
    for period in MealPeriod:
        if total_key(period) in text:
            totals.append(
                f"<li>{period.capitalize()}: "
                f"{_text_node('b', 'total', total_key(period), text)}</li>"
            )
    if GRAND_TOTAL_KEY in text:
        totals.append(
            f"<li>Total: {_text_node('b', 'grand-total', GRAND_TOTAL_KEY, text)}</li>"
        )

    return _PAGE_TEMPLATE.replace("{cards}", "".join(cards)).replace(
        "{totals}", "".join(totals)
    )


def _text_node(tag: str, css_class: str, key: str, text: dict[str, str]) -> str:
    return (
        f'<{tag} class="{css_class}" data-key="{escape(key)}">'
        f"{escape(text.get(key, ''))}</{tag}>"
    )


_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Meal Dashboard</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .card { border: 1px solid #ddd; padding: 1rem; margin-bottom: 1rem; }
      .card.inactive { opacity: 0.5; }
      .row { display: flex; gap: 0.75rem; align-items: center; padding: 0.25rem; }
      .row.active { background: #fff4c2; }
      .inline-input { width: 5rem; }
    </style>
  </head>
  <body>
    <h1>Meal Dashboard</h1>
    <div id="container">{cards}</div>
    <ul id="totals">{totals}</ul>
    <script>
      async function reloadBindings() {
        const res = await fetch('/api/dashboard');
        if (!res.ok) return;
        const data = await res.json();
        for (const [key, value] of Object.entries(data.view.text)) {
          const node = document.querySelector(`[data-key="${key}"]`);
          if (node) node.innerText = value;
        }
        for (const [key, state] of Object.entries(data.view.inputs)) {
          const node = document.querySelector(`[data-key="${key}"]`);
          if (node && document.activeElement !== node) node.value = state.value;
        }
        const container = document.getElementById('container');
        for (const card of data.view.cards) {
          const node = container.querySelector(`section[data-meal="${card.period}"]`);
          if (!node) continue;
          node.classList.toggle('inactive', card.inactive);
          container.appendChild(node);
        }
        const active = data.view.active_period;
        document.querySelectorAll('.row[data-meal]').forEach((row) => {
          row.classList.toggle('active', row.dataset.meal === active);
        });
      }

      document.querySelectorAll('button[data-key]').forEach((btn) => {
        btn.addEventListener('click', async () => {
          const meal = btn.dataset.meal;
          const device = btn.dataset.device;
          const input = document.querySelector(
            `.inline-input[data-meal="${meal}"][data-device="${device}"]`
          );
          btn.disabled = true;
          btn.innerText = '...';
          try {
            const res = await fetch('/api/manual', {
              method: 'POST',
              headers: { 'Content-Type': 'application/json' },
              body: JSON.stringify({ period: meal, device, value: input ? input.value : null })
            });
            const body = await res.json();
            if (!res.ok) {
              alert(body.detail || 'Failed to update data.');
              return;
            }
            if (input) input.value = '';
            await reloadBindings();
          } finally {
            btn.disabled = false;
            btn.innerText = 'Add';
          }
        });
      });

      setInterval(reloadBindings, 10000);
    </script>
  </body>
</html>
"""
