"""
Tests for the Supabase REST client (requests mocked).
"""

from datetime import datetime, timezone
from unittest import mock

import pytest
import requests

from conftest import run
from pinboard.service import QueryError, RestBoardService


def _response(rows, status=200):
    r = mock.Mock()
    r.ok = 200 <= status < 300
    r.status_code = status
    r.text = str(rows)
    r.json.return_value = rows
    return r


@pytest.fixture
def service():
    svc = RestBoardService("https://demo.supabase.co/", api_key="anon-key", timeout=3)
    with mock.patch.object(svc.session, "get") as get:
        svc.get = get
        yield svc
    svc.close()


class TestRequests:

    def test_auth_headers(self, service):
        assert service.session.headers["apikey"] == "anon-key"
        assert service.session.headers["Authorization"] == "Bearer anon-key"

    def test_no_key_no_auth_headers(self):
        svc = RestBoardService("https://demo.supabase.co")
        assert "apikey" not in svc.session.headers
        svc.close()

    def test_list_boards_query(self, service):
        service.get.return_value = _response([
            {"id": 1, "title": "Demo", "slug": "demo", "updated_at": "2024-05-01T10:00:00Z"},
        ])
        boards = run(service.list_boards())

        url = service.get.call_args.args[0]
        params = service.get.call_args.kwargs["params"]
        assert url == "https://demo.supabase.co/rest/v1/boards"
        assert params["order"] == "updated_at.desc"
        assert params["select"] == "id,title,slug,updated_at"
        assert service.get.call_args.kwargs["timeout"] == 3
        assert boards[0].slug == "demo"
        assert boards[0].updated_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_find_board_by_slug(self, service):
        service.get.return_value = _response([
            {"id": "b1", "title": "Demo", "slug": "demo", "background_url": "img.png"},
        ])
        board = run(service.find_board("demo"))
        params = service.get.call_args.kwargs["params"]
        assert params["slug"] == "eq.demo"
        assert "background_url" in params["select"]
        assert board.id == "b1"
        assert board.background_url == "img.png"

    def test_find_board_missing(self, service):
        service.get.return_value = _response([])
        assert run(service.find_board("nope")) is None

    def test_find_board_duplicate_slug(self, service):
        service.get.return_value = _response([{"id": 1}, {"id": 2}])
        with pytest.raises(QueryError):
            run(service.find_board("dup"))

    def test_categories_and_cards_filtered_by_board(self, service):
        service.get.return_value = _response([
            {"id": 1, "board_id": 7, "title": "A", "order_index": 0},
        ])
        categories = run(service.list_categories(7))
        params = service.get.call_args.kwargs["params"]
        assert service.get.call_args.args[0].endswith("/categories")
        assert params["board_id"] == "eq.7"
        assert params["order"] == "order_index.asc"
        assert categories[0].title == "A"

        service.get.return_value = _response([
            {"id": 10, "board_id": 7, "category_id": None, "title": "Card",
             "link_url": "", "order_index": "3"},
        ])
        cards = run(service.list_cards(7))
        assert service.get.call_args.args[0].endswith("/cards")
        assert cards[0].category_id is None
        assert cards[0].link_url is None
        assert cards[0].order_index == 3


class TestFailures:

    def test_http_error(self, service):
        service.get.return_value = _response({"message": "denied"}, status=401)
        with pytest.raises(QueryError) as exc:
            run(service.list_boards())
        assert exc.value.table == "boards"
        assert "401" in str(exc.value)

    def test_transport_error(self, service):
        service.get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(QueryError, match="request failed"):
            run(service.list_cards(1))

    def test_not_json(self, service):
        r = _response([])
        r.json.side_effect = ValueError("bad json")
        service.get.return_value = r
        with pytest.raises(QueryError, match="not JSON"):
            run(service.list_categories(1))

    def test_not_a_list(self, service):
        service.get.return_value = _response({"id": 1})
        with pytest.raises(QueryError, match="row list"):
            run(service.list_boards())
