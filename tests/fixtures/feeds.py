"""Wire payloads for an organisation's question collection."""

API_URI = "https://api.example.com/"
ORGANISATION_URI = "https://api.example.com/organisation/a656927b0f"
QUESTIONS_URI = "https://api.example.com/organisation/a656927b0f/question"
CREATE_FORM_URI = "https://api.example.com/question/form/create"

QUESTION_URI = "https://api.example.com/question/cf6c4b9c7f"
SECOND_QUESTION_URI = "https://api.example.com/question/1a9c2d0e11"
THIRD_QUESTION_URI = "https://api.example.com/question/7e3b04f5a2"


def link(rel: str, href: str) -> dict:
    return {"rel": rel, "href": href}


def question_feed(*items: tuple[str, str]) -> dict:
    """Feed of (id, title) pairs, addressed at QUESTIONS_URI."""
    if not items:
        items = ((QUESTION_URI, "Please tell me about yourself"),)
    return {
        "links": [link("self", QUESTIONS_URI), link("create-form", CREATE_FORM_URI)],
        "items": [{"id": uri, "title": title} for uri, title in items],
    }


def question(uri: str = QUESTION_URI, name: str = "Please tell me about yourself") -> dict:
    return {
        "links": [link("self", uri), link("edit-form", f"{uri}/form/edit")],
        "name": name,
        "type": "text",
    }


def organisation() -> dict:
    return {
        "links": [link("self", ORGANISATION_URI), link("questions", QUESTIONS_URI)],
        "name": "Example Organisation",
    }
