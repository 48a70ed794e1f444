from __future__ import annotations

import pytest

from conftest import auth
from docvault.models.document import Document


@pytest.fixture
def corpus(app, register, uploaded):
    alice = register()["token"]
    bob = register(email="bob@example.com", name="Bob")["token"]

    docs = {
        "title": uploaded(alice, title="Invoice March"),
        "description": uploaded(alice, title="Receipt", description="Paid INVOICE for rent"),
        "content": uploaded(alice, title="Letter"),
        "unrelated": uploaded(alice, title="Holiday photo"),
        "bob_private": uploaded(bob, title="Bob invoice"),
        "bob_public": uploaded(bob, title="Public Invoice template", is_public=True),
    }
    with app.state.db.session() as db:
        db.get(Document, docs["content"]["id"]).ocr_text = "Total due per invoice #42"
        db.commit()

    return alice, docs


def _search(client, token, query):
    r = client.get("/api/search", params={"query": query}, headers=auth(token))
    assert r.status_code == 200, r.text
    return r.json()


def test_search_matches_any_field_case_insensitively(client, corpus):
    alice, docs = corpus
    body = _search(client, alice, "invoice")

    found = {d["id"]: d["relevance"] for d in body["data"]["documents"]}
    assert found == {
        docs["title"]["id"]: "Title match",
        docs["description"]["id"]: "Description match",
        docs["content"]["id"]: "Content match (OCR)",
        docs["bob_public"]["id"]: "Title match",
    }
    assert body["message"] == 'Found 4 document(s) matching "invoice"'


def test_search_results_carry_file_urls(client, corpus):
    alice, _ = corpus
    for d in _search(client, alice, "INVOICE")["data"]["documents"]:
        assert d["fileUrl"].startswith("http://testserver/uploads/")
        assert "invoice" in " ".join(filter(None, [d["title"], d["description"], d["ocrText"]])).lower()


def test_search_never_returns_others_private_documents(client, corpus):
    alice, docs = corpus
    ids = {d["id"] for d in _search(client, alice, "bob")["data"]["documents"]}
    assert docs["bob_private"]["id"] not in ids


def test_empty_query_returns_everything_visible(client, corpus):
    alice, docs = corpus
    ids = {d["id"] for d in _search(client, alice, "")["data"]["documents"]}
    assert ids == {d["id"] for k, d in docs.items() if k != "bob_private"}


def test_wildcards_are_literal(client, corpus):
    alice, _ = corpus
    assert _search(client, alice, "%")["data"]["documents"] == []
    assert _search(client, alice, "_")["data"]["documents"] == []


def test_search_requires_auth(client):
    assert client.get("/api/search", params={"query": "x"}).status_code == 401
