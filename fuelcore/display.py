"""HTML/CSS snippets and export helpers for the Streamlit dashboard."""

from __future__ import annotations

import html
from datetime import date
from typing import Optional

import pandas as pd

PALETTES = {
    "light": {"page": "#f9fafb", "card": "#ffffff", "border": "#e5e7eb", "text": "#111827", "muted": "#6b7280", "accent": "#4f46e5"},
    "dark": {"page": "#111827", "card": "#1f2937", "border": "#374151", "text": "#e5e7eb", "muted": "#9ca3af", "accent": "#818cf8"},
}

FOOTER_CREDITS = "Created by Moksh Shah & Aryan Gamit"


def dashboard_css(theme: str = "light") -> str:
    p = PALETTES.get(theme, PALETTES["light"])
    return f"""
        <style>
        .stApp {{background: {p['page']};color: {p['text']};}}
        .stApp h1, .stApp h2, .stApp h3, .stApp p, .stApp label {{color: {p['text']};}}
        .cards {{display: flex;gap: 16px;flex-wrap: wrap;margin: 12px 0 20px;}}
        .card {{flex: 1 1 200px;border: 1px solid {p['border']};border-radius: 12px;padding: 16px;background: {p['card']};
               box-shadow: 0 1px 2px rgba(0,0,0,0.04);}}
        .card h3 {{font-size: 0.95rem;font-weight: 600;color: {p['muted']};margin: 0 0 6px;}}
        .card p {{font-size: 1.5rem;font-weight: 700;color: {p['accent']};margin: 0;}}
        .insight-card {{border: 1px solid {p['border']};border-radius: 12px;padding: 16px;background: {p['card']};margin-top: 16px;}}
        .insight-item {{padding: 6px 0;border-bottom: 1px dashed {p['border']};}}
        .insight-item:last-child {{border-bottom: none;}}
        .dashboard-footer {{text-align: center;color: {p['muted']};font-size: 0.85rem;margin-top: 24px;}}
        </style>
        """


def card_html(title: str, text: str) -> str:
    return f"<div class='card'><h3>{html.escape(title)}</h3><p>{html.escape(text)}</p></div>"


def cards_html(cards: list) -> str:
    return "<div class='cards'>" + "".join(card_html(c["title"], c["display"]) for c in cards) + "</div>"


def insights_html(recommendations: list) -> str:
    items = "".join(
        f"<div class='insight-item'>{i}. {html.escape(text)}</div>" for i, text in enumerate(recommendations, start=1)
    )
    return f"<div class='insight-card'><h2>💡 Key Recommendations</h2><div class='insight-list'>{items}</div></div>"


def footer_text(year: Optional[int] = None) -> str:
    return f"© {year or date.today().year} Fuel Efficiency Dashboard"


def footer_html(year: Optional[int] = None) -> str:
    return (
        f"<footer class='dashboard-footer'><p>{html.escape(footer_text(year))}</p>"
        f"<p>{html.escape(FOOTER_CREDITS)}</p></footer>"
    )


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
