APP_TITLE = "Resource Tracker"

APP_CSS = """
:root {
  color-scheme: light;
  --bg: #eef3ff;
  --bg-2: #93c5fd;
  --bg-3: #2563eb;
  --glass: rgba(255, 255, 255, 0.72);
  --glass-2: rgba(255, 255, 255, 0.45);
  --border: rgba(255, 255, 255, 0.55);
  --text: #0b1220;
  --muted: #56627a;
  --shadow: 0 20px 50px rgba(10, 20, 45, 0.18);
  --shadow-soft: 0 10px 24px rgba(10, 20, 45, 0.12);
  --blur: 22px;
  --radius: 18px;
  --accent: #2563eb;
  --accent-2: #60a5fa;
  --danger: #ef4444;
  --success: #22c55e;
  --nav-width: 240px;
}

@media (prefers-color-scheme: dark) {
  :root {
    color-scheme: dark;
    --bg: #0b1022;
    --bg-2: #111f3d;
    --bg-3: #1b2f61;
    --glass: rgba(12, 18, 34, 0.7);
    --glass-2: rgba(12, 18, 34, 0.5);
    --border: rgba(255, 255, 255, 0.14);
    --text: #ecf2ff;
    --muted: #a7b6d3;
    --shadow: 0 24px 60px rgba(0, 0, 0, 0.45);
    --shadow-soft: 0 10px 28px rgba(0, 0, 0, 0.3);
    --accent: #6bb7ff;
    --accent-2: #7ee1ff;
  }
}

* { box-sizing: border-box; }

body {
  margin: 0;
  font-family: Inter, "Segoe UI", "Helvetica Neue", Arial, sans-serif;
  color: var(--text);
  background: linear-gradient(135deg, var(--bg-2) 0%, var(--bg) 60%);
  min-height: 100vh;
}

.shell {
  display: flex;
  min-height: 100vh;
}

.sidebar {
  width: var(--nav-width);
  flex: 0 0 var(--nav-width);
  padding: 40px 16px 0;
  background: linear-gradient(90deg, var(--bg-3) 0%, var(--accent-2) 100%);
  color: #fff;
}

.sidebar-title {
  font-weight: 800;
  font-size: 24px;
  text-align: center;
  letter-spacing: 0.08em;
  margin-bottom: 36px;
}

.nav-link {
  display: block;
  padding: 12px 20px;
  margin-bottom: 6px;
  border-radius: 10px;
  color: #fff;
  font-weight: 700;
  text-decoration: none;
}

.nav-link.active { background: rgba(255, 255, 255, 0.22); }

.page {
  flex: 1 1 auto;
  min-width: 0;
  padding: 36px 32px 72px;
  display: grid;
  gap: 20px;
  align-content: start;
}

.glass-surface {
  background: linear-gradient(135deg, var(--glass), var(--glass-2));
  border: 1px solid var(--border);
  border-radius: var(--radius);
  box-shadow: var(--shadow), inset 0 1px 0 rgba(255, 255, 255, 0.45);
  backdrop-filter: blur(var(--blur)) saturate(170%);
  -webkit-backdrop-filter: blur(var(--blur)) saturate(170%);
}

.card { padding: 22px; }

h1, h2, h3 {
  margin: 0 0 8px;
  font-weight: 700;
  letter-spacing: -0.01em;
}

h1 { font-size: 30px; }

.meta { color: var(--muted); font-size: 14px; }

.toolbar {
  display: flex;
  gap: 12px;
  flex-wrap: wrap;
  align-items: center;
}

.form-grid {
  display: grid;
  grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
  gap: 12px;
  align-items: end;
}

.field { display: grid; gap: 6px; }

.label {
  font-size: 11px;
  text-transform: uppercase;
  letter-spacing: 0.12em;
  color: var(--muted);
}

.input, .select {
  width: 100%;
  padding: 10px 12px;
  border-radius: 10px;
  border: 1px solid rgba(37, 99, 235, 0.35);
  background: rgba(255, 255, 255, 0.9);
  font-size: 14px;
  color: var(--text);
}

.input:focus, .select:focus {
  outline: none;
  border-color: var(--accent);
  box-shadow: 0 0 0 4px rgba(37, 99, 235, 0.18);
}

.btn {
  border: 1px solid var(--border);
  background: linear-gradient(135deg, rgba(255, 255, 255, 0.85), rgba(255, 255, 255, 0.45));
  padding: 9px 16px;
  border-radius: 999px;
  cursor: pointer;
  font-size: 13px;
  font-weight: 700;
  color: var(--text);
  box-shadow: var(--shadow-soft);
}

.btn.primary {
  background: linear-gradient(90deg, var(--accent-2) 0%, var(--accent) 100%);
  color: #fff;
  border-color: rgba(37, 99, 235, 0.55);
}

.btn.danger { background: var(--danger); color: #fff; border-color: transparent; }
.btn.success { background: var(--success); color: #fff; border-color: transparent; }
.btn.ghost { background: transparent; box-shadow: none; }

.btn[disabled] {
  cursor: wait;
  opacity: 0.6;
  pointer-events: none;
}

.row-actions { display: flex; gap: 8px; }

.message { margin: 0; font-weight: 600; }
.message.error { color: var(--danger); }
.message.success { color: var(--success); }

.table-wrap { overflow-x: auto; border-radius: 14px; }

.table {
  width: 100%;
  min-width: 600px;
  border-collapse: collapse;
  font-size: 14px;
}

.table th, .table td {
  text-align: left;
  padding: 11px 12px;
  border-bottom: 1px solid rgba(15, 23, 42, 0.08);
}

.table th {
  font-size: 12px;
  letter-spacing: 0.08em;
  text-transform: uppercase;
  color: #fff;
  background: linear-gradient(90deg, var(--accent) 0%, var(--accent-2) 100%);
}

.table th.sortable { cursor: pointer; user-select: none; }
.table td.empty { text-align: center; color: var(--muted); padding: 24px; }

.pill {
  display: inline-flex;
  padding: 3px 10px;
  border-radius: 999px;
  font-size: 12px;
  font-weight: 700;
}

.pill-success { background: rgba(34, 197, 94, 0.18); color: #0f5132; }
.pill-muted { background: rgba(15, 23, 42, 0.08); color: var(--muted); }

.month-nav {
  display: flex;
  align-items: center;
  justify-content: center;
  gap: 20px;
}

.month-nav h2 { min-width: 220px; text-align: center; margin: 0; }

.dropdown { position: relative; }

.dropdown-menu {
  position: absolute;
  top: 110%;
  left: 0;
  z-index: 20;
  min-width: 220px;
  max-height: 320px;
  overflow-y: auto;
  padding: 12px;
  display: grid;
  gap: 6px;
}

.dropdown-menu label { display: flex; gap: 8px; align-items: center; font-size: 14px; }

.calendar-scroll {
  overflow: auto;
  max-height: 70vh;
  border-radius: 14px;
  cursor: grab;
  scrollbar-width: none;
}

.calendar-scroll::-webkit-scrollbar { display: none; }
.calendar-scroll.dragging { cursor: grabbing; user-select: none; }

.calendar {
  border-collapse: separate;
  border-spacing: 0;
  font-size: 12px;
}

.calendar th, .calendar td {
  min-width: 96px;
  padding: 6px;
  border-bottom: 1px solid rgba(15, 23, 42, 0.08);
  border-right: 1px solid rgba(15, 23, 42, 0.06);
  text-align: center;
  vertical-align: middle;
  background: rgba(255, 255, 255, 0.92);
}

.calendar th {
  position: sticky;
  top: 0;
  z-index: 2;
  color: #fff;
  background: var(--accent);
}

.calendar .resource-cell {
  position: sticky;
  left: 0;
  z-index: 1;
  min-width: 180px;
  text-align: left;
  font-weight: 700;
}

.calendar th.resource-cell { z-index: 3; }

.chips { display: flex; flex-direction: column; gap: 3px; }

.chip {
  display: inline-block;
  padding: 4px 6px;
  border-radius: 8px;
  font-weight: 600;
  background: linear-gradient(90deg, #e0e7ff 0%, #c7d2fe 100%);
  color: #1e3a8a;
  word-break: break-word;
}

.cell-over .chip {
  background: linear-gradient(90deg, #fee2e2 0%, #fecaca 100%);
  color: #991b1b;
}

@media (max-width: 820px) {
  .shell { flex-direction: column; }
  .sidebar { width: 100%; flex-basis: auto; padding: 16px; }
  .page { padding: 20px 14px 60px; }
}
"""

# Pans elements marked with data-drag-scroll while the mouse button is held.
DRAG_SCROLL_JS = (
    "(function () {"
    "  var drag = null;"
    "  document.addEventListener('mousedown', function (event) {"
    "    var box = event.target.closest ? event.target.closest('[data-drag-scroll]') : null;"
    "    if (!box) { return; }"
    "    drag = {box: box, x: event.pageX, y: event.pageY, left: box.scrollLeft, top: box.scrollTop};"
    "    box.classList.add('dragging');"
    "  });"
    "  document.addEventListener('mousemove', function (event) {"
    "    if (!drag) { return; }"
    "    event.preventDefault();"
    "    drag.box.scrollLeft = drag.left - (event.pageX - drag.x);"
    "    drag.box.scrollTop = drag.top - (event.pageY - drag.y);"
    "  });"
    "  document.addEventListener('mouseup', function () {"
    "    if (!drag) { return; }"
    "    drag.box.classList.remove('dragging');"
    "    drag = null;"
    "  });"
    "})();"
)
