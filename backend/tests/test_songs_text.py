import pytest
from fastapi.testclient import TestClient
from domain.services.verse_paginator import VersePaginator

LYRICS = "A\n\nB\n\nC"

@pytest.mark.parametrize("page, limit, expected", [
    (1, 2, "A\n\nB"),
    (2, 2, "C"),
    (3, 2, None),
    (1, 10, "A\n\nB\n\nC"),
    (0, 1, "A"),        # page < 1 は 1
    (-3, 1, "A"),
    (2, 0, "B"),        # limit <= 0 は 1
    (3, -5, "C"),
    (None, None, "A"),
])
def test_verse_paginator(page, limit, expected):
    assert VersePaginator(LYRICS).page(page, limit) == expected

def test_verse_paginator_single_verse():
    assert VersePaginator("just one line\nand another").page(1, 1) == "just one line\nand another"
    assert VersePaginator("just one line").page(2, 1) is None

def test_get_text_paginates_verses(client: TestClient, make_song):
    song = make_song("ABC", text=LYRICS)

    response = client.get(f"/api/songs/{song.id}/text", params={"page": 1, "limit": 2})
    assert response.status_code == 200
    assert response.json() == {"text": "A\n\nB"}

    response = client.get(f"/api/songs/{song.id}/text", params={"page": 2, "limit": 2})
    assert response.status_code == 200
    assert response.json() == {"text": "C"}

    response = client.get(f"/api/songs/{song.id}/text", params={"page": 3, "limit": 2})
    assert response.status_code == 404
    assert response.json() == {"error": "no more verses"}

def test_get_text_defaults_and_unparsable_values(client: TestClient, make_song):
    song = make_song("ABC", text=LYRICS)

    # page / limit 未指定は 1 ページ目・1節
    response = client.get(f"/api/songs/{song.id}/text")
    assert response.json() == {"text": "A"}

    # 解釈できない値も 1 に丸める
    response = client.get(f"/api/songs/{song.id}/text", params={"page": "two", "limit": "many"})
    assert response.status_code == 200
    assert response.json() == {"text": "A"}

    response = client.get(f"/api/songs/{song.id}/text", params={"page": 2})
    assert response.json() == {"text": "B"}

def test_get_text_missing_song(client: TestClient):
    response = client.get("/api/songs/999/text")
    assert response.status_code == 404
    assert response.json() == {"error": "no such text with song_id: 999"}

def test_get_text_invalid_song_id(client: TestClient):
    response = client.get("/api/songs/abc/text")
    assert response.status_code == 400
    assert "error" in response.json()
