#!/usr/bin/env python3
"""
web_remote.py  –  unified web UI + diagnostics + remote control

Endpoints
---------
/               → HTML page with buttons, live state, diagnostics, link to /log
/state          → JSON snapshot of the presentation
/diag, /data    → JSON object of diagnostic metrics
/insights       → Gemini bullet points for the loaded training run
/action?cmd=…   → inject control commands (play, pause, toggle, next, prev,
                  jump&to=N, reset, narrate, fullscreen, quit)
/log            → contents of runtime.log (if present)

Commands are only *posted* to EventManager; the main loop applies them, so
the HTTP threads never mutate presentation state.
"""

from __future__ import annotations
import http.server
import logging
import socketserver
import threading
import urllib.parse
import json
import time
import os
import traceback
import psutil
import platform
from typing import TYPE_CHECKING, Any

from events import EventManager
from insights import generate_insights
import config

if TYPE_CHECKING:                       # avoid circular import at runtime
    from orchestrator import PlaybackOrchestrator, PlaybackSnapshot
    from training_summary import TrainingSummary

log = logging.getLogger(__name__)

# ── diagnostics refresh cadence ───────────────────────────────────────────
_last_diag_time = 0.0
_diag_interval  = getattr(config, "DIAG_REFRESH_INTERVAL", 1.0)

# ── global diagnostic store ───────────────────────────────────────────────
monitor_data: dict[str, Any] = {
    "cpu_percent":       0.0,
    "cpu_per_core":      [],
    "mem_used":          "0 MB",
    "mem_total":         "0 MB",
    "process_rss":       "0 MB",
    "script_uptime":     "0d 00:00:00",
    "load_avg":          "",
    "last_http_crash":   "",
    "python_version":    platform.python_version(),
}

_script_start = time.monotonic()

# ── latest presentation state (written on the main loop) ──────────────────
_state_lock   = threading.Lock()
_latest_state: dict[str, Any] = {}


def publish(snap: "PlaybackSnapshot") -> None:
    """Orchestrator listener: keep a JSON-ready copy for the HTTP threads."""
    global _latest_state
    data = snap.as_dict()
    with _state_lock:
        _latest_state = data


def latest_state() -> dict[str, Any]:
    with _state_lock:
        return dict(_latest_state)


# ── helpers ────────────────────────────────────────────────────────────────
def _fmt_duration(secs: float) -> str:
    d, rem = divmod(int(secs), 86400)
    h, rem = divmod(rem, 3600)
    m, s   = divmod(rem, 60)
    return f"{d}d {h:02}:{m:02}:{s:02}"


def _maybe_update_diagnostics() -> None:
    global _last_diag_time
    now = time.monotonic()
    if now - _last_diag_time >= _diag_interval:
        _last_diag_time = now
        _update_diagnostics()


def _update_diagnostics() -> None:
    """Refresh CPU, memory, uptime and load in `monitor_data`."""
    per_core = psutil.cpu_percent(percpu=True)
    avg_cpu  = sum(per_core) / len(per_core) if per_core else 0.0
    monitor_data["cpu_percent"]  = round(avg_cpu, 1)
    monitor_data["cpu_per_core"] = [round(p, 1) for p in per_core]
    vm = psutil.virtual_memory()
    monitor_data["mem_used"]  = f"{vm.used // 1024**2} MB"
    monitor_data["mem_total"] = f"{vm.total // 1024**2} MB"
    monitor_data["process_rss"] = f"{psutil.Process().memory_info().rss // 1024**2} MB"
    monitor_data["script_uptime"] = _fmt_duration(time.monotonic() - _script_start)
    try:
        la = os.getloadavg()
        monitor_data["load_avg"] = ", ".join(f"{x:.2f}" for x in la)
    except (AttributeError, OSError):
        monitor_data["load_avg"] = "N/A"


# ── query → action ─────────────────────────────────────────────────────────
_SIMPLE = {
    "play":       "play",
    "pause":      "pause",
    "toggle":     "toggle_play",
    "next":       "next",
    "prev":       "prev",
    "reset":      "reset",
    "narrate":    "toggle_narration",
    "fullscreen": "toggle_fullscreen",
    "quit":       "quit",
}


def parse_action(query: str) -> dict | None:
    """
    Turn an /action query string into an EventManager action.
    Returns None for unknown commands; raises ValueError for a bad jump.
    """
    qs  = urllib.parse.parse_qs(query)
    cmd = qs.get("cmd", [""])[0]

    if cmd in _SIMPLE:
        return {"type": _SIMPLE[cmd]}

    if cmd == "jump":
        raw = qs.get("to", [""])[0]
        idx = int(raw)                           # ValueError on junk
        count = latest_state().get("scene_count")
        if idx < 0 or (count is not None and idx >= count):
            raise ValueError(f"scene index {idx} out of range")
        return {"type": "jump", "to": idx}

    return None


# ── reusable threaded HTTP server ──────────────────────────────────────────
class ReusableTCPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads      = True
    allow_reuse_address = True


# ── request handler ────────────────────────────────────────────────────────
class RemoteHandler(http.server.BaseHTTPRequestHandler):
    def log_message(self, *args):
        return  # silence default logging

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        path, qs = parsed.path, parsed.query

        if path == "/":
            return self._serve_html()
        if path == "/state":
            return self._serve_json(latest_state())
        if path in ("/diag", "/data"):
            _maybe_update_diagnostics()
            return self._serve_json(monitor_data)
        if path == "/insights":
            summary = getattr(self.server, "summary", None)
            if summary is None:
                return self.send_error(404, "No training summary loaded")
            return self._serve_json({"insights": generate_insights(summary)})
        if path == "/log":
            return self._serve_log()
        if path == "/action":
            return self._serve_action(qs)

        self.send_error(404, "Not found")

    # ── helpers for each route ───────────────────────────────────────────
    def _serve_html(self):
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.end_headers()
        self.wfile.write(HTML_PAGE.encode("utf-8"))

    def _serve_json(self, obj: Any):
        b = json.dumps(obj).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_log(self):
        try:
            with open(config.LOG_PATH, "rb") as f:
                data = f.read()
        except OSError:
            return self.send_error(404, "Log file not found")
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _serve_action(self, query: str):
        try:
            act = parse_action(query)
        except ValueError as exc:
            return self.send_error(400, str(exc))
        if act is None:
            return self.send_error(400, "Unknown cmd")

        EventManager.post(act)
        self.send_response(204)
        self.end_headers()


# ── simple HTML UI ─────────────────────────────────────────────────────────
HTML_PAGE = """
<!doctype html><html><head><meta charset="utf-8">
<title>Briefing Remote & Diagnostics</title>
<style>
 body{background:#000;color:#0f0;font-family:monospace;padding:1em;}
 a.button{display:inline-block;margin:4px;padding:6px 12px;border:1px solid #0f0;
          text-decoration:none;color:#0f0;}
 pre{margin:0.5em 0;font-family:monospace;}
</style></head><body>
<h2>Training Briefing Remote</h2>
<a class="button" href="/action?cmd=prev">◀ Prev</a>
<a class="button" href="/action?cmd=toggle">Play / Pause</a>
<a class="button" href="/action?cmd=next">Next ▶</a>
<a class="button" href="/action?cmd=reset">Reset</a>
<a class="button" href="/action?cmd=narrate">Narration</a>
<a class="button" href="/action?cmd=fullscreen">Fullscreen</a>
<a class="button" href="/action?cmd=quit">Quit</a>
<a class="button" href="/insights">Insights</a>
<a class="button" href="/log">View log</a>

<div><h3>State</h3><pre id="state"></pre></div>
<div><h3>Diagnostics</h3><pre id="diag"></pre></div>

<script>
 async function refreshUI(){
   try {
     let s  = await fetch('/state'); let st = await s.json();
     document.getElementById('state').textContent = JSON.stringify(st, null, 1);
     let d  = await fetch('/diag');  let dg = await d.json();
     let txt = '';
     for (let [k,v] of Object.entries(dg)){
       txt += k.padEnd(20,' ') + v + '\\n';
     }
     document.getElementById('diag').textContent = txt;
   } catch(e){
     console.error(e);
   }
 }
 setInterval(refreshUI, 250);
 refreshUI();
</script>
</body></html>
"""


# ── server bootstrap with auto-restart ────────────────────────────────────
def start(orch: "PlaybackOrchestrator", summary: "TrainingSummary | None" = None,
          port: int = getattr(config, "WEB_PORT", 8080)):
    publish(orch.snapshot())
    orch.subscribe(publish)

    def _serve_loop():
        while True:
            try:
                with ReusableTCPServer(("", port), RemoteHandler) as httpd:
                    httpd.summary = summary
                    httpd.serve_forever()
            except Exception:
                monitor_data["last_http_crash"] = traceback.format_exc()
                log.exception("web remote crashed – restarting")
                time.sleep(1)

    threading.Thread(target=_serve_loop, daemon=True).start()
    print(f"🌐 Web UI & diagnostics listening on port {port}")
