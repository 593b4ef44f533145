"""Seed flow used until an admin saves one."""

import json
from pathlib import Path
from typing import Any

import yaml

from ..models.flow import ROOT_ID, FlowGraph

DEFAULT_FLOW: dict[str, Any] = {
    "root": {
        "text": "Hi! I am Navi 🤖. How can I help you today?",
        "options": [
            {"label": "IGNOU Assignments", "nextId": "assignments"},
            {"label": "Exam Updates", "nextId": "exams"},
            {"label": "Download Papers", "nextId": "papers"},
            {"label": "Contact Support", "nextId": "contact"},
        ],
    },
    "assignments": {
        "text": "Please select your course type for Assignments:",
        "options": [
            {"label": "Master's Degree (MA/M.Com)", "nextId": "masters"},
            {"label": "Bachelor's Degree (BA/B.Com)", "nextId": "bachelors"},
            {"label": "Diploma / Certificate", "nextId": "diploma"},
            {"label": "Go to Main Menu", "nextId": "root"},
        ],
    },
    "masters": {
        "text": "Great! Which specific subject do you need?",
        "options": [
            {"label": "M.Com (Commerce)", "nextId": "final_msg"},
            {"label": "MA English (MEG)", "nextId": "final_msg"},
            {"label": "MA Hindi (MHD)", "nextId": "final_msg"},
            {"label": "MA History (MAH)", "nextId": "final_msg"},
            {"label": "Back", "nextId": "assignments"},
        ],
    },
    "bachelors": {
        "text": "Select your Bachelor's requirement:",
        "options": [
            {"label": "BA (General)", "nextId": "final_msg"},
            {"label": "B.Com", "nextId": "final_msg"},
            {"label": "B.Ed", "nextId": "final_msg"},
            {"label": "Back", "nextId": "assignments"},
        ],
    },
    "diploma": {
        "text": "Select your Diploma/Certificate requirement:",
        "options": [
            {"label": "Diploma Assignments", "nextId": "final_msg"},
            {"label": "Certificate Assignments", "nextId": "final_msg"},
            {"label": "Back", "nextId": "assignments"},
        ],
    },
    "exams": {
        "text": "What information do you need regarding Exams?",
        "options": [
            {"label": "Date Sheet", "nextId": "final_msg"},
            {"label": "Hall Ticket Download", "nextId": "final_msg"},
            {"label": "Result Updates", "nextId": "final_msg"},
            {"label": "Go to Blog Updates", "nextId": "open:/blog"},
            {"label": "Go to Main Menu", "nextId": "root"},
        ],
    },
    "papers": {
        "text": "Which papers do you need?",
        "options": [
            {"label": "Previous Year Question Papers (PYQ)", "nextId": "open:/question-papers"},
            {"label": "Guess Papers", "nextId": "open:/guess-papers"},
            {"label": "Go to Main Menu", "nextId": "root"},
        ],
    },
    "contact": {
        "text": "Choose support option:",
        "options": [
            {"label": "Open WhatsApp", "nextId": "whatsapp_action"},
            {"label": "Contact Page", "nextId": "open:/contact"},
            {"label": "Go to Main Menu", "nextId": "root"},
        ],
    },
    "final_msg": {
        "text": (
            "Thank you! Please visit our 'Shop' section or WhatsApp us for this "
            "specific requirement. Should I connect you to WhatsApp?"
        ),
        "options": [
            {"label": "Yes, Open WhatsApp", "nextId": "whatsapp_action"},
            {"label": "No, Go to Main Menu", "nextId": "root"},
        ],
    },
}


def default_graph() -> FlowGraph:
    """Build the seed flow, root first."""
    order = [ROOT_ID] + [k for k in DEFAULT_FLOW if k != ROOT_ID]
    return FlowGraph.from_wire({"isActive": True, "order": order, "nodes": DEFAULT_FLOW})


def load_seed_flow(path: str | Path) -> FlowGraph:
    """Load a seed flow from a YAML or JSON file.

    The file may hold the full ``{isActive, order, nodes}`` payload or just
    the nodes mapping.

    Args:
        path: Path to a ``.yaml``/``.yml`` or ``.json`` file.

    Returns:
        Parsed graph (not validated).
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix == ".json":
            raw = json.load(f)
        else:
            raw = yaml.safe_load(f)

    if isinstance(raw, dict) and "nodes" not in raw:
        raw = {"nodes": raw}
    return FlowGraph.from_wire(raw)
