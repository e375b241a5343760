import json
import os
import sys
import threading
from io import BytesIO

import pytest

# Ensure logger writes to a temp folder within tests
os.environ.setdefault("LOG_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "_logs"))

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PIL import Image

from promo.llm.registry import ImageResult, parse_tool_arguments


DEFAULT_ARGUMENTS = {
    "tagTool": lambda prompt: json.dumps({"tags": ["Linux Containers", " Podman "]}),
    "postTool": lambda prompt: json.dumps(
        {"posts": ["Containers are coming!", "Learn namespaces with us.", "Don't miss it!"]}
    ),
    "videoTitleTool": lambda prompt: json.dumps(
        {"titles": ["Containers 101", "Inside Namespaces", "Podman vs Docker"]}
    ),
}


class FakeGenerator:
    """In-memory stand-in for the OpenAI client.

    Tool arguments go through the same validation as real responses.
    """

    def __init__(self, arguments=None, design=None, image=None):
        self.arguments = dict(DEFAULT_ARGUMENTS)
        self.arguments.update(arguments or {})
        self.design = design or (lambda prompt: "A futuristic skyline made of shipping containers and penguins.")
        self.image = image
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, kind, **data):
        with self._lock:
            self.calls.append((kind, data))
            return len(self.calls)

    def calls_of(self, kind, name=None):
        return [d for k, d in self.calls if k == kind and (name is None or d.get("tool_name") == name)]

    def structured_generate(self, system, prompt, response_model, tool_name, description=""):
        self._record("structured", tool_name=tool_name, system=system, prompt=prompt)
        return parse_tool_arguments(self.arguments[tool_name](prompt), response_model, tool_name)

    def generate_text(self, system, prompt):
        self._record("text", system=system, prompt=prompt)
        return self.design(prompt)

    def generate_image(self, prompt):
        n = self._record("image", prompt=prompt)
        if self.image:
            return self.image(prompt)
        return ImageResult(url=f"https://images.example/{n}.png",
                           revised_prompt=f"Revised: {prompt} variant {n}")


def make_png(size=(64, 36), color=(30, 120, 200)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def no_downloads(monkeypatch):
    """Serve a small PNG for every image URL instead of going to the network."""
    from promo.stages import images

    fetched = []

    def fake_download(session, url, timeout=60.0):
        fetched.append(url)
        return make_png()

    monkeypatch.setattr(images, "download_bytes", fake_download)
    return fetched


@pytest.fixture
def single_meeting_raw():
    return {
        "meetingDate": "2024-02-14",
        "meetingType": "SLUUG",
        "presentations": [
            {
                "title": "Intro to Containers",
                "presenterNames": ["Jane Doe"],
                "abstract": "A talk about containers.",
            }
        ],
    }


@pytest.fixture
def multi_meeting_raw():
    return {
        "meetingDate": "2024-03-13",
        "meetingType": "SLUUG",
        "meetupUrl": "https://www.meetup.com/sluug/events/1/",
        "presentations": [
            {"title": "Bash Tips", "presenterNames": ["Ann Lee"], "abstract": "Shell tricks."},
            {"title": "ZFS Deep Dive", "presenterNames": ["Bo Chen", "Cy Park"], "abstract": "Pools and datasets."},
        ],
    }
