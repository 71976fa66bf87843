import pytest

from lunex import ClientOptions, ConfigurationError, ExponentialBackoff, FixedBackoff, LunexClient


def test_construct_defaults():
    client = LunexClient("https://api.example.com")
    assert client.base_url == "https://api.example.com"
    assert client.timeout == 10000  # noqa: PLR2004
    assert client.max_retries == 0
    assert isinstance(client.options.backoff, ExponentialBackoff)
    assert client.default_headers == {}


def test_construct_from_kwargs():
    client = LunexClient("https://api.example.com", {"X-App": "demo"}, max_retries=2, backoff=100)
    assert client.max_retries == 2  # noqa: PLR2004
    assert isinstance(client.options.backoff, FixedBackoff)
    assert client.default_headers == {"X-App": "demo"}


def test_options_object_preferred_and_headers_merged():
    opts = ClientOptions(timeout=500, default_headers={"Accept": "text/plain", "X-A": "1"})
    client = LunexClient("https://api.example.com", {"accept": "application/json"}, options=opts)
    assert client.timeout == 500  # noqa: PLR2004
    assert client.default_headers == {"X-A": "1", "accept": "application/json"}


def test_options_mapping_accepted():
    client = LunexClient("https://api.example.com", options={"max_retries": 3, "timeout": 50})
    assert client.max_retries == 3  # noqa: PLR2004
    assert client.timeout == 50  # noqa: PLR2004


@pytest.mark.parametrize("base_url", ["", None])
def test_missing_base_url(base_url):
    with pytest.raises(ConfigurationError):
        LunexClient(base_url)


def test_invalid_options():
    with pytest.raises(ConfigurationError):
        ClientOptions(max_retries=-1)
    with pytest.raises(ConfigurationError):
        ClientOptions(timeout=0)
    with pytest.raises(ConfigurationError):
        LunexClient("https://api.example.com", timeout=-5)


def test_options_are_immutable():
    headers = {"X-A": "1"}
    opts = ClientOptions(default_headers=headers)
    headers["X-B"] = "2"
    assert opts.default_headers == {"X-A": "1"}
    with pytest.raises(AttributeError):
        opts.max_retries = 4  # type: ignore[misc]
    assert opts.replace(max_retries=4).max_retries == 4  # noqa: PLR2004


def test_unknown_kwarg_rejected():
    with pytest.raises(TypeError):
        LunexClient("https://api.example.com", retries=3)


def test_options_headers_are_read_only():
    client = LunexClient("https://api.example.com", {"X-A": "1"})
    with pytest.raises(TypeError):
        client.options.default_headers["X-B"] = "2"  # type: ignore[index]
    copy = client.default_headers
    copy["X-B"] = "2"
    assert client.default_headers == {"X-A": "1"}


def test_options_backoff_is_coerced():
    assert ClientOptions(backoff=100).backoff.delay_for(3) == 100  # noqa: PLR2004
    assert isinstance(ClientOptions(backoff="fixed").backoff, FixedBackoff)
    assert isinstance(ClientOptions().backoff, ExponentialBackoff)
    with pytest.raises(ConfigurationError):
        ClientOptions(backoff="linear")
    with pytest.raises(ConfigurationError):
        ClientOptions(backoff=True)
