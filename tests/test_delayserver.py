import threading
import time
import urllib.error
import urllib.request

import pytest

from pollrt.delayserver import make_server


@pytest.fixture
def server_url():
    server = make_server("127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(5)


def _fetch(url):
    with urllib.request.urlopen(url, timeout=5) as response:
        return response.status, response.read()


def test_echoes_decoded_message(server_url):
    status, body = _fetch(f"{server_url}/0/Hello%20World")
    assert status == 200
    assert body == b"Hello World"


def test_reports_numbered_requests(server_url, capsys):
    first_status, first_body = _fetch(f"{server_url}/0/HelloAsyncAwait")
    second_status, second_body = _fetch(f"{server_url}/0/second")
    assert (first_status, first_body) == (200, b"HelloAsyncAwait")
    assert (second_status, second_body) == (200, b"second")
    lines = capsys.readouterr().out.splitlines()
    assert "#1 - 0ms: HelloAsyncAwait" in lines
    assert "#2 - 0ms: second" in lines


def test_delays_response(server_url):
    started = time.monotonic()
    _, body = _fetch(f"{server_url}/150/slow")
    assert time.monotonic() - started >= 0.15
    assert body == b"slow"


@pytest.mark.parametrize("path", ["/abc/x", "/1/2/3", "/1", "/-5/x", "/1/"])
def test_bad_paths_are_not_found(server_url, path):
    with pytest.raises(urllib.error.HTTPError) as info:
        _fetch(server_url + path)
    assert info.value.code == 404
    status, body = _fetch(f"{server_url}/0/ok")
    assert (status, body) == (200, b"ok")