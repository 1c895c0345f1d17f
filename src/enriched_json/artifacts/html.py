from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Template
from markupsafe import Markup


_HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ title }}</title>
  <style>
    :root {
      --bg: #f3f1ec;
      --ink: #1f2a30;
      --muted: #5b6b75;
      --accent: #1f7a8c;
      --card: #fffdf8;
      --border: rgba(31, 42, 48, 0.12);
      --shadow: 0 10px 24px rgba(31, 42, 48, 0.10);
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: "Space Grotesk", "Avenir Next", "Trebuchet MS", sans-serif;
      color: var(--ink);
      background: var(--bg);
      min-height: 100vh;
    }
    header, main {
      max-width: 1200px;
      margin: 0 auto;
      padding: 24px;
    }
    h1 { margin: 0; font-size: clamp(26px, 4vw, 38px); letter-spacing: -0.02em; }
    .subtitle { color: var(--muted); margin-top: 6px; }
    main { display: grid; gap: 24px; padding-top: 0; }
    .card {
      background: var(--card);
      border: 1px solid var(--border);
      border-radius: 16px;
      padding: 16px;
      box-shadow: var(--shadow);
    }
    .section-title { margin: 4px 0 12px; font-size: 20px; }
    .filters { display: flex; flex-wrap: wrap; gap: 8px; margin-bottom: 8px; }
    button.filter {
      border: 1px solid var(--border);
      background: #fff;
      border-radius: 999px;
      padding: 6px 12px;
      cursor: pointer;
      font-weight: 600;
    }
    button.filter.active { background: var(--accent); color: #fff; border-color: transparent; }
    table { width: 100%; border-collapse: collapse; font-size: 14px; }
    th, td { text-align: left; padding: 10px 12px; border-bottom: 1px solid var(--border); }
    tr:hover { background: rgba(31, 122, 140, 0.08); cursor: pointer; }
    .status { font-weight: 700; text-transform: uppercase; font-size: 12px; letter-spacing: 0.08em; }
    .status.passed { color: #1b7f5a; }
    .status.failed { color: #c0392b; }
    .status.pending { color: #7b7b7b; }
    .detail { display: grid; gap: 16px; grid-template-columns: repeat(auto-fit, minmax(280px, 1fr)); }
    pre {
      margin: 0;
      max-height: 340px;
      overflow: auto;
      background: #0f1c1f;
      color: #f4f1ed;
      padding: 12px;
      border-radius: 12px;
      font-family: "IBM Plex Mono", "Consolas", monospace;
      font-size: 12px;
      white-space: pre-wrap;
    }
    .badge {
      display: inline-block;
      background: rgba(31, 122, 140, 0.15);
      color: var(--accent);
      padding: 4px 8px;
      border-radius: 6px;
      font-size: 12px;
      margin: 0 6px 6px 0;
    }
    h4 { margin: 8px 0; color: var(--muted); text-transform: uppercase; font-size: 12px; letter-spacing: 0.08em; }
  </style>
</head>
<body>
  <header>
    <h1>{{ title }}</h1>
    <div class="subtitle" id="summary-line"></div>
  </header>
  <main>
    <section class="card">
      <h2 class="section-title">Examples</h2>
      <div class="filters" id="filters"></div>
      <table>
        <thead>
          <tr>
            <th>Example</th>
            <th>Status</th>
            <th>Matcher</th>
            <th>Run time (s)</th>
          </tr>
        </thead>
        <tbody id="example-rows"></tbody>
      </table>
    </section>
    <section class="card">
      <h2 class="section-title">Example Detail</h2>
      <div id="example-meta"></div>
      <div class="detail">
        <div><h4>Expected</h4><pre id="expected-view"></pre></div>
        <div><h4>Actual</h4><pre id="actual-view"></pre></div>
      </div>
      <h4>Diff</h4>
      <pre id="diff-view"></pre>
      <h4>Message</h4>
      <pre id="message-view"></pre>
    </section>
  </main>
  <script id="enriched-json-data" type="application/json">{{ data_json }}</script>
  <script>
    const data = JSON.parse(document.getElementById("enriched-json-data").textContent);
    const examples = data.examples || [];
    document.getElementById("summary-line").textContent = data.summary_line || "";

    const statusFilters = ["all", "passed", "failed", "pending"];
    let activeFilter = "all";
    let selectedId = null;

    function cell(text, className) {
      const td = document.createElement("td");
      if (className) {
        const span = document.createElement("span");
        span.className = className;
        span.textContent = text;
        td.appendChild(span);
      } else {
        td.textContent = text;
      }
      return td;
    }

    function pretty(value) {
      if (value === undefined) return "n/a";
      return typeof value === "string" ? value : JSON.stringify(value, null, 2);
    }

    function renderFilters() {
      const filters = document.getElementById("filters");
      filters.innerHTML = "";
      statusFilters.forEach((filter) => {
        const btn = document.createElement("button");
        btn.className = "filter" + (filter === activeFilter ? " active" : "");
        btn.textContent = filter.toUpperCase();
        btn.onclick = () => {
          activeFilter = filter;
          renderFilters();
          renderTable();
        };
        filters.appendChild(btn);
      });
    }

    function renderTable() {
      const tbody = document.getElementById("example-rows");
      tbody.innerHTML = "";
      const filtered = examples.filter((item) => activeFilter === "all" || item.status === activeFilter);
      filtered.forEach((item) => {
        const row = document.createElement("tr");
        row.appendChild(cell(item.full_description || item.id));
        row.appendChild(cell(item.status, "status " + item.status));
        row.appendChild(cell(item.details?.matcher_name || ""));
        row.appendChild(cell(String(item.run_time)));
        row.onclick = () => selectExample(item.id);
        tbody.appendChild(row);
      });
      if (filtered.length && selectedId === null) {
        selectExample(filtered[0].id);
      }
    }

    function selectExample(id) {
      selectedId = id;
      const item = examples.find((candidate) => candidate.id === id);
      if (!item) return;
      const meta = document.getElementById("example-meta");
      meta.innerHTML = "";
      [`Example: ${item.id}`, `Status: ${item.status}`, `Location: ${item.metadata?.location || "n/a"}`].forEach((text) => {
        const badge = document.createElement("span");
        badge.className = "badge";
        badge.textContent = text;
        meta.appendChild(badge);
      });
      const details = item.details || {};
      document.getElementById("expected-view").textContent = pretty(details.expected);
      document.getElementById("actual-view").textContent = pretty(details.actual);
      document.getElementById("diff-view").textContent = details.diff || "No diff.";
      document.getElementById("message-view").textContent = item.exception?.message || "None";
    }

    renderFilters();
    renderTable();
  </script>
</body>
</html>
"""


def render_html(report: dict[str, Any], *, title: str = "Enriched JSON Report") -> str:
    data_json = json.dumps(report, ensure_ascii=False).replace("</", "<\\/")
    return Template(_HTML_TEMPLATE).render(title=title, data_json=Markup(data_json))


def write_html(path: Path, report: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html(report), encoding="utf-8")
    return path
