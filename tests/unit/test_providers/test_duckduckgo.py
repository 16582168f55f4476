import pytest
from unittest.mock import AsyncMock, patch

from websearch.models.search import MultiSearchRequest, SafeSearch
from websearch.services.providers.duckduckgo import DuckDuckGoProvider, unwrap_redirect
from websearch.utils.exceptions import HttpError, InvalidInputError

DDG_HTML = """
<html><body>
<div class="result results_links results_links_deep web-result">
  <h2 class="result__title">
    <a class="result__a" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fwww.python.org%2F&amp;rut=abc">Welcome to
      <b>Python</b>.org</a>
  </h2>
  <a class="result__snippet" href="#">The official   home of the Python language.</a>
</div>
<div class="result result--ad">
  <h2 class="result__title">
    <a class="result__a" href="https://duckduckgo.com/y.js?ad_provider=x">Sponsored</a>
  </h2>
</div>
<div class="result">
  <h2 class="result__title">
    <a class="result__a" href="https://docs.python.org/3/">Python 3 docs</a>
  </h2>
</div>
<div class="result">
  <h2 class="result__title">
    <a class="result__a" href="https://pypi.org/">PyPI</a>
  </h2>
  <div class="result__snippet">Package index.</div>
</div>
</body></html>
"""


@pytest.fixture
def provider():
    return DuckDuckGoProvider()


def test_unwrap_redirect():
    wrapped = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com%2Fa%3Fb%3D1&rut=x"
    assert unwrap_redirect(wrapped) == "https://example.com/a?b=1"
    assert unwrap_redirect("https://example.com/") == "https://example.com/"


def test_parse_results(provider):
    results = provider.parse_results(DDG_HTML, max_results=10)

    assert [r.url for r in results] == [
        "https://www.python.org/",
        "https://docs.python.org/3/",
        "https://pypi.org/",
    ]
    assert results[0].title == "Welcome to Python .org"
    assert results[0].snippet == "The official home of the Python language."
    assert results[0].domain == "python.org"
    assert results[1].snippet is None
    assert all(r.provider == "duckduckgo" for r in results)


def test_parse_results_caps_count(provider):
    assert len(provider.parse_results(DDG_HTML, max_results=1)) == 1


def test_parse_empty_page(provider):
    assert provider.parse_results("<html><body></body></html>", 10) == []


@pytest.mark.asyncio
async def test_search_posts_form(provider):
    request = MultiSearchRequest(
        query="python", region="de-de", safe_search=SafeSearch.STRICT, max_results=2
    )

    with patch(
        "websearch.services.providers.duckduckgo.request_text",
        new=AsyncMock(return_value=DDG_HTML),
    ) as mock_request:
        results = await provider.search(request)

    assert len(results) == 2
    args = mock_request.call_args
    assert args.args[1] == "POST"
    assert args.kwargs["form"] == {"q": "python", "b": "", "kl": "de-de", "kp": "1"}
    assert "User-Agent" in args.kwargs["headers"]


def test_form_defaults_region(provider):
    form = provider._build_form(MultiSearchRequest(query="q"))
    assert form == {"q": "q", "b": "", "kl": "wt-wt"}


def test_form_rejects_empty_query(provider):
    with pytest.raises(InvalidInputError):
        provider._build_form(MultiSearchRequest(query=" "))


@pytest.mark.asyncio
async def test_http_error_propagates(provider):
    with patch(
        "websearch.services.providers.duckduckgo.request_text",
        new=AsyncMock(side_effect=HttpError("blocked", status_code=403)),
    ):
        with pytest.raises(HttpError):
            await provider.search(MultiSearchRequest(query="q"))


def test_config(provider):
    assert provider.config()["base_url"] == "https://html.duckduckgo.com/html"
