"""Static HTML page for the leaderboard table.

Each cell carries its comparison key in `data-sort`, computed by the same
`sort_value` used by `TableController`, so the page script only compares
keys and never re-parses the displayed text. The refresh button (and the
page load) re-read the document from `data-source` and rebuild the body
with keys computed by the same rules; a failed read keeps the rows.
"""
import html
import json
from typing import Optional

from packages.config.constants import DEFAULT_DOCUMENT_NAME
from .table import (COLUMNS, COL_NAME, EXTERNAL_LINK_CLASS, EXTERNAL_LINK_REL,
                    TableRow, TableView, sort_value)

_HEADER_CLASS = {"asc": "th-sort-asc", "desc": "th-sort-desc", "unsorted": ""}

_SORT_SCRIPT = """
document.querySelectorAll("table.wikitable.sortable").forEach(function (table) {
  var headers = Array.from(table.querySelectorAll("th"));
  headers.forEach(function (th, column) {
    th.addEventListener("click", function () {
      var asc = !th.classList.contains("th-sort-asc");
      var body = table.tBodies[0];
      var rows = Array.from(body.rows);
      rows.sort(function (a, b) {
        var x = JSON.parse(a.cells[column].dataset.sort);
        var y = JSON.parse(b.cells[column].dataset.sort);
        return (x < y ? -1 : x > y ? 1 : 0) * (asc ? 1 : -1);
      });
      body.append.apply(body, rows);
      headers.forEach(function (h) { h.classList.remove("th-sort-asc", "th-sort-desc"); });
      th.classList.add(asc ? "th-sort-asc" : "th-sort-desc");
    });
  });
});
"""

_LOAD_SCRIPT = """
var refreshButton = document.getElementById("refresh-leaderboard");
var parseKSuffix = refreshButton.dataset.parseKSuffix === "true";

function setStatus(message, state) {
  var el = document.getElementById("leaderboard-status");
  el.textContent = message;
  el.className = "status-" + state;
}

function leadingNumber(text) {
  var m = /^\\s*[+-]?(\\d+\\.?\\d*|\\.\\d+)([eE][+-]?\\d+)?/.exec(text);
  return m ? parseFloat(m[0]) : 0;
}

function behindMagnitude(text) {
  if (text === "N/A") return 0;
  if (text.slice(-1) === "M") return leadingNumber(text.slice(0, -1)) * 1000000;
  if (parseKSuffix && text.slice(-1) === "K") return leadingNumber(text.slice(0, -1)) * 1000;
  return leadingNumber(text);
}

function thousands(n) {
  return String(n).replace(/\\B(?=(\\d{3})+(?!\\d))/g, ",");
}

function cell(text, key, cls) {
  var td = document.createElement("td");
  if (cls) td.className = cls;
  td.dataset.sort = JSON.stringify(key);
  td.textContent = text;
  return td;
}

function buildRow(e) {
  var rank = e.rank == null ? "" : String(e.rank);
  var points = e.points == null ? "" : thousands(e.points);
  var behind = e.pointsBehindRaw != null ? e.pointsBehindRaw
    : e.pointsBehind != null ? thousands(e.pointsBehind) : "";
  var tr = document.createElement("tr");
  tr.appendChild(cell(rank, leadingNumber(rank)));
  var name = cell(e.profile_url ? "" : e.name, e.name.trim().toLowerCase());
  if (e.profile_url) {
    var a = document.createElement("a");
    a.href = e.profile_url;
    a.target = "_blank";
    a.rel = "%(rel)s";
    a.className = "%(link_class)s";
    a.textContent = e.name;
    name.appendChild(a);
  }
  tr.appendChild(name);
  tr.appendChild(cell(points, leadingNumber(points.replace(/,/g, "")), "points"));
  tr.appendChild(cell(behind, behindMagnitude(behind.trim()), "points"));
  return tr;
}

function loadLeaderboard() {
  var source = refreshButton.dataset.source;
  setStatus("Loading...", "loading");
  return fetch(source, {cache: "no-store"})
    .then(function (resp) {
      if (!resp.ok) throw new Error("Failed to load " + source + " (status: " + resp.status + ")");
      return resp.json();
    })
    .then(function (doc) {
      var table = document.querySelector("table.wikitable.sortable");
      var entries = (doc.entries || []).slice().sort(function (a, b) {
        return (a.rank || 0) - (b.rank || 0);
      });
      table.tBodies[0].replaceChildren.apply(table.tBodies[0], entries.map(buildRow));
      table.querySelectorAll("th").forEach(function (h) { h.classList.remove("th-sort-asc", "th-sort-desc"); });
      setStatus("Loaded", "success");
    })
    .catch(function (err) {
      console.warn("Could not load leaderboard:", err);
      setStatus("Could not load leaderboard", "error");
    });
}

refreshButton.addEventListener("click", loadLeaderboard);
loadLeaderboard();
""" % {"rel": EXTERNAL_LINK_REL, "link_class": EXTERNAL_LINK_CLASS}


def esc(v) -> str:
    return html.escape("" if v is None else str(v))


def _cell(row: TableRow, column: int, parse_k_suffix: bool) -> str:
    key = esc(json.dumps(sort_value(row, column, parse_k_suffix)))
    text = row.cells[column]
    if column == COL_NAME:
        if row.profile_url:
            inner = (f'<a href="{esc(row.profile_url)}" target="_blank" '
                     f'rel="{EXTERNAL_LINK_REL}" class="{EXTERNAL_LINK_CLASS}">{esc(text)}</a>')
        else:
            inner = esc(text)
        return f'<td data-sort="{key}">{inner}</td>'
    cls = ' class="points"' if column > COL_NAME else ""
    return f'<td{cls} data-sort="{key}">{esc(text)}</td>'


def render_table(view: TableView, parse_k_suffix: bool = False) -> str:
    head = "".join(
        f'<th class="{_HEADER_CLASS[state]}">{esc(title)}</th>' if _HEADER_CLASS[state]
        else f"<th>{esc(title)}</th>"
        for title, state in zip(COLUMNS, view.headers)
    )
    body = "\n".join(
        "<tr>" + "".join(_cell(r, c, parse_k_suffix) for c in range(len(COLUMNS))) + "</tr>"
        for r in view.rows
    )
    return (f'<table class="wikitable sortable">\n<thead><tr>{head}</tr></thead>\n'
            f"<tbody>\n{body}\n</tbody>\n</table>")


def render_page(view: TableView, status: str, message: str = "",
                generated_at: Optional[str] = None, parse_k_suffix: bool = False,
                source: str = DEFAULT_DOCUMENT_NAME) -> str:
    """`source` is the document URL the page re-reads, relative to the page."""
    stamp = f'<p class="generated-at">Updated {esc(generated_at)}</p>' if generated_at else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Energy Points Leaderboard</title>
</head>
<body>
<h1>Energy Points Leaderboard</h1>
<div class="leaderboard-controls">
<button id="refresh-leaderboard" type="button" data-source="{esc(source)}"
        data-parse-k-suffix="{str(parse_k_suffix).lower()}">Refresh</button>
<span id="leaderboard-status" class="status-{esc(status)}">{esc(message)}</span>
</div>
{stamp}
{render_table(view, parse_k_suffix)}
<script>{_SORT_SCRIPT}</script>
<script>{_LOAD_SCRIPT}</script>
</body>
</html>
"""
