#!/usr/bin/env python3
"""
TellCMG - Voice Your Ideas

Web app where loan officers speak or type a rough idea, tag it, optionally
refine it through a short AI interview, and get back a structured idea
submission they can email to the IT Product team.

Features:
- Voice input (browser speech recognition) or keyboard input
- One-shot structuring with category, detail, format and requirement options
- Clarifying interview (new idea or enhance an existing submission)
- History and settings kept in the browser's local storage
- Works without an LLM key (templated fallback output)

Run:
    python3 web_app.py

Then open: http://localhost:5001
"""

import logging
import secrets
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, render_template_string, request

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from tellcmg.agents.interview_dialogue import InterviewDialogue
from tellcmg.agents.structuring_agent import StructuringAgent
from tellcmg.config import Settings, configure_logging
from tellcmg.errors import (
    CollaboratorError,
    ConfigurationError,
    DialogueFinishedError,
    GenerationCancelled,
    RequestInFlightError,
    ValidationError,
)
from tellcmg.inflight import InFlightRegistry
from tellcmg.llm.base import LLMProvider
from tellcmg.llm.factory import LLMPurpose, create_llm_provider
from tellcmg.mail.smtp_transport import SmtpMailTransport
from tellcmg.mail.submission import Submission, SubmissionService
from tellcmg.prompts.assembler import ATTACHMENT_CHAR_LIMIT, URL_REFERENCE_CHAR_LIMIT
from tellcmg.schemas.catalog import CATEGORY_CATALOG, MODIFIER_CATALOG
from tellcmg.schemas.idea import DetailLevel, IdeaDraft, OutputFormat, category_tag_of
from tellcmg.storage.history import HISTORY_STORAGE_KEY, MAX_HISTORY
from tellcmg.storage.settings import SETTINGS_STORAGE_KEY

logger = logging.getLogger("tellcmg.web")


@dataclass
class Services:
    """Collaborators shared by all requests."""
    settings: Settings
    structuring_llm: Optional[LLMProvider]
    interview_llm: Optional[LLMProvider]
    submissions: SubmissionService
    inflight: InFlightRegistry


def build_services(settings: Optional[Settings] = None) -> Services:
    settings = settings or Settings.load()
    return Services(
        settings=settings,
        structuring_llm=create_llm_provider(settings.llm, LLMPurpose.STRUCTURING),
        interview_llm=create_llm_provider(settings.llm, LLMPurpose.INTERVIEW),
        submissions=SubmissionService(
            SmtpMailTransport(settings.mail),
            recipient=settings.mail.recipient,
        ),
        inflight=InFlightRegistry(),
    )


services = build_services()
configure_logging(services.settings.log_level)

app = Flask(__name__)
app.secret_key = secrets.token_hex(16)

DETAIL_LEVEL_OPTIONS = [
    {"id": DetailLevel.CONCISE.value, "label": "Brief"},
    {"id": DetailLevel.BALANCED.value, "label": "Balanced"},
    {"id": DetailLevel.COMPREHENSIVE.value, "label": "Detailed"},
]

OUTPUT_FORMAT_OPTIONS = [
    {"id": OutputFormat.STRUCTURED.value, "label": "Structured"},
    {"id": OutputFormat.CONVERSATIONAL.value, "label": "Narrative"},
    {"id": OutputFormat.BULLET_POINTS.value, "label": "Bullet Points"},
]


HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>TellCMG - Voice Your Ideas</title>
    <style>
        :root {
            --bg: #1a2332; --panel: #1f2b3d; --header: #2b3e50;
            --accent: #9bc53d; --text: #f0f4f8; --muted: #94a3b8; --dim: #64748b;
            --danger: #ef4444;
        }
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: 'Segoe UI', Arial, sans-serif; background: var(--bg); color: var(--text); min-height: 100vh; }
        header { background: var(--header); border-bottom: 3px solid var(--accent); padding: 16px 24px; display: flex; justify-content: space-between; align-items: center; }
        header .brand { font-size: 24px; font-weight: 800; color: var(--accent); }
        header .brand small { display: block; font-size: 11px; color: var(--dim); letter-spacing: 1px; text-transform: uppercase; }
        header .status { font-size: 12px; color: var(--dim); }
        .layout { display: grid; grid-template-columns: 1fr 300px; gap: 20px; max-width: 1200px; margin: 20px auto; padding: 0 20px; }
        .card { background: var(--panel); border-radius: 12px; padding: 20px; margin-bottom: 20px; border: 1px solid rgba(148,163,184,0.1); }
        h2 { font-size: 16px; margin-bottom: 12px; color: var(--accent); }
        textarea, input[type=text], input[type=email], input[type=url], select {
            width: 100%; background: var(--bg); color: var(--text); border: 1px solid rgba(148,163,184,0.25);
            border-radius: 8px; padding: 10px; font-size: 14px; font-family: inherit;
        }
        textarea { min-height: 120px; resize: vertical; }
        .row { display: flex; gap: 10px; align-items: center; margin-top: 10px; flex-wrap: wrap; }
        .btn { background: var(--accent); color: #10202f; border: none; padding: 10px 18px; border-radius: 8px; font-weight: 700; cursor: pointer; }
        .btn.secondary { background: transparent; color: var(--text); border: 1px solid rgba(148,163,184,0.35); }
        .btn.danger { background: var(--danger); color: white; }
        .btn:disabled { opacity: 0.5; cursor: not-allowed; }
        .mic { width: 48px; height: 48px; border-radius: 50%; font-size: 20px; }
        .mic.listening { background: var(--danger); animation: pulse 1s infinite; }
        @keyframes pulse { 50% { opacity: 0.6; } }
        .group-title { font-size: 12px; color: var(--dim); text-transform: uppercase; margin: 12px 0 6px; letter-spacing: 1px; }
        .chips { display: flex; flex-wrap: wrap; gap: 6px; }
        .chip { background: var(--bg); border: 1px solid rgba(148,163,184,0.25); color: var(--muted); padding: 6px 10px; border-radius: 16px; font-size: 13px; cursor: pointer; }
        .chip.selected { border-color: var(--accent); color: var(--accent); background: rgba(155,197,61,0.1); }
        .output { white-space: pre-wrap; font-size: 14px; line-height: 1.6; color: var(--muted); min-height: 80px; }
        .history-item { padding: 10px; border-radius: 8px; background: var(--bg); margin-bottom: 8px; cursor: pointer; font-size: 13px; }
        .history-item.active { border: 1px solid var(--accent); }
        .history-item .meta { font-size: 11px; color: var(--dim); display: flex; justify-content: space-between; }
        .history-item .del { color: var(--danger); cursor: pointer; }
        .chat { max-height: 320px; overflow-y: auto; margin-bottom: 10px; }
        .bubble { padding: 10px 12px; border-radius: 10px; margin: 6px 0; white-space: pre-wrap; font-size: 14px; }
        .bubble.assistant { background: var(--bg); color: var(--muted); }
        .bubble.user { background: rgba(155,197,61,0.15); color: var(--text); margin-left: 40px; }
        .refs li { font-size: 13px; color: var(--muted); list-style: none; display: flex; justify-content: space-between; padding: 4px 0; }
        .toast { position: fixed; bottom: 20px; left: 50%; transform: translateX(-50%); background: var(--header); border: 1px solid var(--accent); padding: 10px 18px; border-radius: 8px; display: none; }
        .hidden { display: none !important; }
        @media (max-width: 900px) { .layout { grid-template-columns: 1fr; } }
    </style>
</head>
<body>
<header>
    <div class="brand">TellCMG<small>Voice Your Ideas</small></div>
    <div class="status" id="status"></div>
</header>

<div class="layout">
    <main>
        <div class="card">
            <h2>Your idea</h2>
            <textarea id="transcript" placeholder="Tap the mic and describe your idea, or type it here..."></textarea>
            <div class="row">
                <button class="btn mic" id="micBtn" title="Speak your idea">🎤</button>
                <span id="micHint" style="font-size:12px;color:var(--dim)"></span>
            </div>
        </div>

        <div class="card">
            <h2>Categories</h2>
            <div id="categories"></div>
        </div>

        <div class="card">
            <h2>Options</h2>
            <div class="row">
                <select id="detailLevel"></select>
                <select id="outputFormat"></select>
            </div>
            <div class="group-title">Requirements</div>
            <div class="chips" id="modifiers"></div>
            <div class="group-title">Context</div>
            <textarea id="contextInfo" style="min-height:60px" placeholder="Anything else the reviewers should know?"></textarea>
            <div class="group-title">Attachments (text files, first {{ attachment_limit }} characters used)</div>
            <input type="file" id="fileInput" multiple accept=".txt,.md,.csv,.json,.log">
            <ul class="refs" id="attachmentList"></ul>
            <div class="group-title">URL references (first {{ url_limit }} characters used)</div>
            <div class="row">
                <input type="text" id="refTitle" placeholder="Title" style="flex:1">
                <input type="url" id="refUrl" placeholder="https://..." style="flex:2">
            </div>
            <textarea id="refContent" style="min-height:60px;margin-top:8px" placeholder="Paste the relevant text from the page"></textarea>
            <div class="row"><button class="btn secondary" id="addRefBtn">Add reference</button></div>
            <ul class="refs" id="refList"></ul>
        </div>

        <div class="card">
            <div class="row" style="margin-top:0">
                <button class="btn" id="generateBtn">Structure my idea</button>
                <button class="btn danger hidden" id="cancelBtn">Cancel</button>
                <button class="btn secondary" id="interviewBtn">Refine with interview</button>
            </div>
        </div>

        <div class="card hidden" id="interviewCard">
            <h2>Interview</h2>
            <div class="chat" id="chat"></div>
            <div class="row">
                <input type="text" id="answer" placeholder="Your answer..." style="flex:1">
                <button class="btn" id="answerBtn">Send</button>
                <button class="btn secondary" id="finishBtn">Finish now</button>
                <button class="btn secondary" id="closeInterviewBtn">Close</button>
            </div>
        </div>

        <div class="card">
            <h2>Structured submission</h2>
            <div class="output" id="output">Your structured idea will appear here.</div>
            <textarea id="outputEditor" class="hidden" style="min-height:240px"></textarea>
            <div class="row">
                <button class="btn secondary" id="copyBtn">Copy</button>
                <button class="btn secondary" id="editBtn">Edit</button>
                <input type="email" id="submitterEmail" placeholder="Your email (optional)" style="flex:1">
                <button class="btn" id="submitBtn">Submit idea</button>
            </div>
        </div>
    </main>

    <aside>
        <div class="card">
            <div class="row" style="margin-top:0;justify-content:space-between">
                <h2 style="margin:0">History</h2>
                <button class="btn secondary" id="clearHistoryBtn" style="padding:4px 10px;font-size:12px">Clear</button>
            </div>
            <div id="history" style="margin-top:12px"></div>
        </div>
    </aside>
</div>
<div class="toast" id="toast"></div>

<script>
const HISTORY_KEY = {{ history_key|tojson }};
const SETTINGS_KEY = {{ settings_key|tojson }};
const MAX_HISTORY = {{ max_history }};
const DETAIL_LEVELS = {{ detail_levels|tojson }};
const OUTPUT_FORMATS = {{ output_formats|tojson }};

const $ = (id) => document.getElementById(id);
const state = {
    draftId: Math.random().toString(36).slice(2) + Date.now().toString(36),
    categories: [], modifiers: [], attachments: [], urlReferences: [],
    history: [], activeHistoryId: null, generating: false, controller: null,
    interview: { messages: [], existingPrompt: '', busy: false },
    document: ''
};

function toast(text, ms = 2500) {
    const el = $('toast'); el.textContent = text; el.style.display = 'block';
    clearTimeout(el._t); el._t = setTimeout(() => el.style.display = 'none', ms);
}

function escapeHtml(s) {
    return String(s).replace(/[&<>"']/g, c => ({'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'}[c]));
}

// ---- persisted state --------------------------------------------------
function loadHistory() {
    try { state.history = JSON.parse(localStorage.getItem(HISTORY_KEY) || '[]'); }
    catch (e) { console.error('Failed to load history:', e); state.history = []; }
}
function saveHistory() {
    try { localStorage.setItem(HISTORY_KEY, JSON.stringify(state.history)); }
    catch (e) { console.error('Failed to save history:', e); }
}
function addToHistory(transcript, prompt, mode) {
    if (!prompt || !prompt.trim() || prompt.includes('[COMPLETE]') || prompt.includes('[/COMPLETE]')) return;
    const item = { id: Date.now().toString(), timestamp: Date.now(), transcript, prompt, mode };
    state.history = [item, ...state.history.slice(0, MAX_HISTORY - 1)];
    state.activeHistoryId = item.id;
    saveHistory(); renderHistory();
}
function loadSettings() {
    try {
        const s = JSON.parse(localStorage.getItem(SETTINGS_KEY) || 'null');
        if (!s) return;
        if (s.modes) state.categories = s.modes;
        else if (s.mode) state.categories = [s.mode];  // migrate old single mode
        if (s.detailLevel) $('detailLevel').value = s.detailLevel;
        if (s.outputFormat) $('outputFormat').value = s.outputFormat;
        if (s.modifiers) state.modifiers = s.modifiers;
    } catch (e) { console.error('Failed to load settings:', e); }
}
function saveSettings() {
    try {
        localStorage.setItem(SETTINGS_KEY, JSON.stringify({
            modes: state.categories, detailLevel: $('detailLevel').value,
            outputFormat: $('outputFormat').value, modifiers: state.modifiers
        }));
    } catch (e) { console.error('Failed to save settings:', e); }
}

// ---- rendering ----------------------------------------------------------
let catalog = { groups: [], modifiers: [] };

function renderChips() {
    const box = $('categories'); box.innerHTML = '';
    catalog.groups.forEach(g => {
        const title = document.createElement('div'); title.className = 'group-title'; title.textContent = g.title;
        const chips = document.createElement('div'); chips.className = 'chips';
        g.categories.forEach(c => {
            const chip = document.createElement('span');
            chip.className = 'chip' + (state.categories.includes(c.id) ? ' selected' : '');
            chip.textContent = c.icon + ' ' + c.label; chip.title = c.summary;
            chip.onclick = () => { toggle(state.categories, c.id); saveSettings(); renderChips(); };
            chips.appendChild(chip);
        });
        box.appendChild(title); box.appendChild(chips);
    });
    const mods = $('modifiers'); mods.innerHTML = '';
    catalog.modifiers.forEach(m => {
        const chip = document.createElement('span');
        chip.className = 'chip' + (state.modifiers.includes(m.id) ? ' selected' : '');
        chip.textContent = m.label; chip.title = m.description;
        chip.onclick = () => { toggle(state.modifiers, m.id); saveSettings(); renderChips(); };
        mods.appendChild(chip);
    });
}
function toggle(list, id) { const i = list.indexOf(id); if (i >= 0) list.splice(i, 1); else list.push(id); }

function renderRefs() {
    $('attachmentList').innerHTML = state.attachments.map((a, i) =>
        `<li>${escapeHtml(a.name)} <span class="del" data-att="${i}">✕</span></li>`).join('');
    $('refList').innerHTML = state.urlReferences.map((r, i) =>
        `<li>${escapeHtml(r.title)} <span class="del" data-ref="${i}">✕</span></li>`).join('');
    document.querySelectorAll('[data-att]').forEach(el => el.onclick = () => { state.attachments.splice(+el.dataset.att, 1); renderRefs(); });
    document.querySelectorAll('[data-ref]').forEach(el => el.onclick = () => { state.urlReferences.splice(+el.dataset.ref, 1); renderRefs(); });
}

function renderHistory() {
    const box = $('history');
    if (!state.history.length) { box.innerHTML = '<div style="font-size:13px;color:var(--dim)">No ideas yet.</div>'; return; }
    box.innerHTML = state.history.map(h => `
        <div class="history-item ${h.id === state.activeHistoryId ? 'active' : ''}" data-id="${h.id}">
            <div>${escapeHtml((h.transcript || h.prompt).slice(0, 80))}</div>
            <div class="meta"><span>${new Date(h.timestamp).toLocaleString()}</span><span class="del" data-del="${h.id}">Delete</span></div>
        </div>`).join('');
    box.querySelectorAll('.history-item').forEach(el => el.onclick = (ev) => {
        if (ev.target.dataset.del) return;
        const item = state.history.find(h => h.id === el.dataset.id);
        $('transcript').value = item.transcript;
        state.categories = item.mode ? item.mode.split(',').filter(Boolean) : [];
        showDocument(item.prompt); state.activeHistoryId = item.id;
        renderChips(); renderHistory(); toast('Loaded from history', 2000);
    });
    box.querySelectorAll('[data-del]').forEach(el => el.onclick = () => {
        state.history = state.history.filter(h => h.id !== el.dataset.del);
        if (state.activeHistoryId === el.dataset.del) state.activeHistoryId = null;
        saveHistory(); renderHistory();
    });
}

function showDocument(text) {
    state.document = text; $('output').textContent = text;
    $('outputEditor').value = text;
}

// ---- voice --------------------------------------------------------------
const Recognition = window.SpeechRecognition || window.webkitSpeechRecognition;
let recognizer = null, listening = false;
if (!Recognition) {
    $('micBtn').disabled = true; $('micHint').textContent = 'Voice input is not supported in this browser. Try Chrome or Edge.';
} else {
    recognizer = new Recognition(); recognizer.continuous = true; recognizer.interimResults = true; recognizer.lang = 'en-US';
    let base = '';
    recognizer.onstart = () => { base = $('transcript').value ? $('transcript').value + ' ' : ''; };
    recognizer.onresult = (e) => {
        let text = '';
        for (let i = 0; i < e.results.length; i++) text += e.results[i][0].transcript;
        $('transcript').value = base + text;
    };
    recognizer.onend = () => { listening = false; $('micBtn').classList.remove('listening'); $('micHint').textContent = ''; };
    $('micBtn').onclick = () => {
        if (listening) { recognizer.stop(); return; }
        listening = true; $('micBtn').classList.add('listening'); $('micHint').textContent = 'Listening... tap again to stop';
        recognizer.start();
    };
}
function stopListening() { if (listening && recognizer) recognizer.stop(); }

// ---- structuring --------------------------------------------------------
async function generate() {
    const transcript = $('transcript').value.trim();
    if (!transcript) { toast('Say or type your idea first.'); return; }
    if (state.generating) return;
    stopListening();
    state.generating = true; state.controller = new AbortController();
    $('generateBtn').disabled = true; $('cancelBtn').classList.remove('hidden');
    try {
        const res = await fetch('/api/generate-prompt', {
            method: 'POST', headers: { 'Content-Type': 'application/json' },
            signal: state.controller.signal,
            body: JSON.stringify({
                draftId: state.draftId, transcript, categories: state.categories,
                detailLevel: $('detailLevel').value, outputFormat: $('outputFormat').value,
                modifiers: state.modifiers, contextInfo: $('contextInfo').value,
                attachments: state.attachments, urlReferences: state.urlReferences
            })
        });
        const data = await res.json();
        if (data.cancelled) { toast('Generation cancelled', 2000); }
        else if (data.prompt) {
            showDocument(data.prompt);
            addToHistory(transcript, data.prompt, state.categories.join(','));
            toast('Idea structured successfully!');
        } else { throw new Error(data.error || 'No prompt returned'); }
    } catch (e) {
        if (e.name === 'AbortError') toast('Generation cancelled', 2000);
        else { console.error('Generation failed:', e); toast('Failed to generate. Please try again.'); }
    }
    state.controller = null; state.generating = false;
    $('generateBtn').disabled = false; $('cancelBtn').classList.add('hidden');
}
function cancelGeneration() {
    fetch('/api/cancel', { method: 'POST', headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ draftId: state.draftId }) }).catch(() => {});
    if (state.controller) state.controller.abort();
}

// ---- interview ----------------------------------------------------------
function renderChat() {
    $('chat').innerHTML = state.interview.messages.map(m =>
        `<div class="bubble ${m.role}">${escapeHtml(m.content)}</div>`).join('');
    $('chat').scrollTop = $('chat').scrollHeight;
}
async function interviewCall(action) {
    if (state.interview.busy) return;
    state.interview.busy = true; $('answerBtn').disabled = true; $('finishBtn').disabled = true;
    try {
        const res = await fetch('/api/interview', {
            method: 'POST', headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({
                draftId: state.draftId, action, transcript: $('transcript').value.trim(),
                category: state.categories.join(','), messages: state.interview.messages,
                existingPrompt: state.interview.existingPrompt
            })
        });
        const data = await res.json();
        if (data.isComplete) {
            showDocument(data.finalPrompt);
            addToHistory($('transcript').value.trim(), data.finalPrompt, state.categories.join(','));
            $('interviewCard').classList.add('hidden'); toast('Enhanced idea ready!');
        } else if (data.message) {
            state.interview.messages.push({ role: 'assistant', content: data.message }); renderChat();
        } else if (data.error) { toast(data.error); }
    } catch (e) { console.error('Interview failed:', e); toast('Failed to process interview. Please try again.'); }
    state.interview.busy = false; $('answerBtn').disabled = false; $('finishBtn').disabled = false;
}
function startInterview() {
    stopListening();
    state.interview = { messages: [], existingPrompt: state.document || '', busy: false };
    $('interviewCard').classList.remove('hidden'); renderChat(); interviewCall('start');
}
function sendAnswer() {
    const text = $('answer').value.trim(); if (!text) return;
    state.interview.messages.push({ role: 'user', content: text }); $('answer').value = ''; renderChat();
    interviewCall('continue');
}

// ---- output & submit ----------------------------------------------------
async function submitIdea() {
    const doc = ($('outputEditor').classList.contains('hidden') ? state.document : $('outputEditor').value).trim();
    if (!doc) { toast('Structure an idea before submitting.'); return; }
    $('submitBtn').disabled = true;
    try {
        const res = await fetch('/api/submit-idea', {
            method: 'POST', headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ document: doc, categories: state.categories, submitterIdentity: $('submitterEmail').value.trim() || undefined })
        });
        const data = await res.json();
        toast(data.success ? 'Idea submitted successfully!' : (data.error || 'Failed to submit idea.'));
    } catch (e) { toast('Failed to submit idea. Please try again.'); }
    $('submitBtn').disabled = false;
}

// ---- wiring -------------------------------------------------------------
async function init() {
    DETAIL_LEVELS.forEach(d => $('detailLevel').add(new Option(d.label, d.id)));
    OUTPUT_FORMATS.forEach(f => $('outputFormat').add(new Option(f.label, f.id)));
    $('detailLevel').value = 'balanced'; $('outputFormat').value = 'structured';
    loadHistory(); loadSettings(); renderHistory();
    const [cat, status] = await Promise.all([fetch('/api/catalog').then(r => r.json()), fetch('/api/status').then(r => r.json())]);
    catalog = cat; renderChips();
    $('status').textContent = status.llm ? 'AI: ' + status.llm : 'AI not configured: templated output';

    $('detailLevel').onchange = saveSettings; $('outputFormat').onchange = saveSettings;
    $('generateBtn').onclick = generate; $('cancelBtn').onclick = cancelGeneration;
    $('interviewBtn').onclick = startInterview; $('answerBtn').onclick = sendAnswer;
    $('answer').onkeydown = (e) => { if (e.key === 'Enter') sendAnswer(); };
    $('finishBtn').onclick = () => interviewCall('generate');
    $('closeInterviewBtn').onclick = () => $('interviewCard').classList.add('hidden');
    $('copyBtn').onclick = () => navigator.clipboard.writeText(state.document).then(() => toast('Copied!', 1500));
    $('editBtn').onclick = () => {
        const editing = !$('outputEditor').classList.contains('hidden');
        if (editing) showDocument($('outputEditor').value);
        $('outputEditor').classList.toggle('hidden'); $('output').classList.toggle('hidden');
        $('editBtn').textContent = editing ? 'Edit' : 'Done';
    };
    $('submitBtn').onclick = submitIdea;
    $('clearHistoryBtn').onclick = () => { state.history = []; state.activeHistoryId = null; saveHistory(); renderHistory(); };
    $('fileInput').onchange = (e) => {
        Array.from(e.target.files).forEach(file => {
            const reader = new FileReader();
            reader.onload = () => { state.attachments.push({ name: file.name, content: String(reader.result) }); renderRefs(); };
            reader.readAsText(file);
        });
        e.target.value = '';
    };
    $('addRefBtn').onclick = () => {
        const url = $('refUrl').value.trim(); if (!url) return;
        state.urlReferences.push({ title: $('refTitle').value.trim() || url, url, content: $('refContent').value, type: 'webpage' });
        $('refTitle').value = ''; $('refUrl').value = ''; $('refContent').value = ''; renderRefs();
    };
}
init();
</script>
</body>
</html>
"""


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _request_key(data: dict) -> str:
    """In-flight key: the client's draft id, or a one-off key when absent."""
    return str(data.get("draftId") or f"anon-{secrets.token_hex(8)}")


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


@app.route('/')
def index():
    return render_template_string(
        HTML_TEMPLATE,
        history_key=HISTORY_STORAGE_KEY,
        settings_key=SETTINGS_STORAGE_KEY,
        max_history=MAX_HISTORY,
        attachment_limit=f"{ATTACHMENT_CHAR_LIMIT:,}",
        url_limit=f"{URL_REFERENCE_CHAR_LIMIT:,}",
        detail_levels=DETAIL_LEVEL_OPTIONS,
        output_formats=OUTPUT_FORMAT_OPTIONS,
    )


@app.route('/api/catalog', methods=['GET'])
def catalog():
    """Categories (grouped), modifiers, detail levels and output formats."""
    return jsonify({
        'groups': CATEGORY_CATALOG.to_dict(),
        'modifiers': MODIFIER_CATALOG.to_dict(),
        'detailLevels': DETAIL_LEVEL_OPTIONS,
        'outputFormats': OUTPUT_FORMAT_OPTIONS,
    })


@app.route('/api/status', methods=['GET'])
def status():
    llm = services.structuring_llm
    return jsonify({
        'llm': f"{llm.name} ({llm.model})" if llm else None,
        'mail': services.submissions.transport.is_configured,
    })


@app.route('/api/generate-prompt', methods=['POST'])
def generate_prompt():
    """Structure one idea draft."""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    draft = IdeaDraft.from_payload(data)
    if not draft.text:
        return jsonify({'error': 'No idea text provided'}), 400

    agent = StructuringAgent(llm=services.structuring_llm)
    try:
        with services.inflight.track(_request_key(data)) as call:
            result = call.run(agent.structure, draft)
    except RequestInFlightError as e:
        return jsonify({'error': e.public_message}), 409
    except GenerationCancelled:
        return jsonify({'cancelled': True})
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except CollaboratorError:
        return jsonify({'error': 'Failed to generate idea'}), 500
    except Exception as e:
        logger.exception("Generate idea error: %s", e)
        return jsonify({'error': 'Failed to generate idea'}), 500

    return jsonify({'prompt': result.document})


@app.route('/api/interview', methods=['POST'])
def interview():
    """Run one step of the clarifying interview."""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    action = data.get('action')
    if action not in ('start', 'continue', 'generate'):
        return jsonify({'error': 'Unknown interview action'}), 400

    messages = data.get('messages') or []
    if not isinstance(messages, list):
        return jsonify({'error': 'messages must be a list'}), 400
    if action == 'continue' and not messages:
        return jsonify({'error': 'No messages provided'}), 400

    dialogue = InterviewDialogue.restore(
        [] if action == 'start' else messages,
        llm=services.interview_llm,
        original_idea=_text(data.get('transcript')),
        category=category_tag_of(data.get('category') or data.get('mode')),
        base_draft_text=_text(data.get('existingPrompt')),
    )
    step = {
        'start': dialogue.start,
        'continue': dialogue.advance,
        'generate': dialogue.complete,
    }[action]

    try:
        with services.inflight.track(_request_key(data)) as call:
            reply = call.run(step)
    except RequestInFlightError as e:
        return jsonify({'error': e.public_message}), 409
    except GenerationCancelled:
        return jsonify({'cancelled': True})
    except DialogueFinishedError as e:
        return jsonify({'error': e.public_message}), 400
    except Exception as e:
        logger.exception("Interview API error: %s", e)
        return jsonify({'error': 'Failed to process interview'}), 500

    return jsonify(reply.to_dict())


@app.route('/api/submit-idea', methods=['POST'])
def submit_idea():
    """Email a finished submission to the intake mailbox."""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    submission = Submission.from_payload(data)
    try:
        services.submissions.submit(submission)
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except ConfigurationError as e:
        return jsonify({'error': e.public_message}), 500
    except CollaboratorError as e:
        return jsonify({'error': e.public_message}), 502
    except Exception as e:
        logger.exception("Submit idea error: %s", e)
        return jsonify({'error': 'Failed to submit idea. Please try again.'}), 500

    return jsonify({'success': True, 'message': 'Idea submitted successfully!'})


@app.route('/api/cancel', methods=['POST'])
def cancel():
    """Abort the in-flight request for a draft."""
    data = _json_body()
    if data is None or not data.get('draftId'):
        return jsonify({'error': 'No draftId provided'}), 400
    return jsonify({'cancelled': services.inflight.cancel(str(data['draftId']))})


if __name__ == '__main__':
    print(f"""
╔═══════════════════════════════════════════════════════════════╗
║               TELLCMG - VOICE YOUR IDEAS                       ║
╠═══════════════════════════════════════════════════════════════╣
║  Voice Input: Browser speech recognition                       ║
║  Also works with keyboard input                                ║
╠═══════════════════════════════════════════════════════════════╣
║  1. Speak or type your idea                                    ║
║  2. Tag categories and pick options                            ║
║  3. Structure it, or refine it through a short interview       ║
║  4. Submit it to the IT Product team                           ║
╚═══════════════════════════════════════════════════════════════╝

Starting web server...

Open your browser to: http://localhost:{services.settings.port}

Press Ctrl+C to stop the server.
    """)

    app.run(debug=True, host='0.0.0.0', port=services.settings.port, threaded=True)
