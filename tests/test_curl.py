import pytest

from http_file_runner.curl import curl_to_http, http_to_curl, request_to_curl
from http_file_runner.errors import ConversionError
from http_file_runner.parser import HttpRequest, parse_http_text


class TestCurlToHttp:
    def test_simple_get(self):
        assert curl_to_http("curl https://api.example.com/users") == (
            "# Converted from cURL\n###\nGET https://api.example.com/users\n"
        )

    def test_post_with_headers_and_data(self):
        http = curl_to_http(
            "curl -X POST https://api.example.com/users "
            "-H 'Content-Type: application/json' "
            "-d '{\"name\": \"John\"}'"
        )
        assert http == (
            "# Converted from cURL\n"
            "###\n"
            "POST https://api.example.com/users\n"
            "Content-Type: application/json\n"
            "\n"
            '{"name": "John"}\n'
        )

    def test_data_implies_post(self):
        assert "POST https://h/form" in curl_to_http("curl https://h/form --data 'a=1' --data 'b=2'")
        assert curl_to_http("curl https://h/form --data 'a=1' --data 'b=2'").endswith("\na=1&b=2\n")

    def test_line_continuations(self):
        command = "curl \\\n  -H 'Accept: text/plain' \\\n  https://h/x"
        assert curl_to_http(command) == "# Converted from cURL\n###\nGET https://h/x\nAccept: text/plain\n"

    def test_json_flag(self):
        http = curl_to_http("curl --json '{\"a\": 1}' https://h/x")
        assert "Content-Type: application/json" in http
        assert "Accept: application/json" in http
        assert http.endswith('\n{"a": 1}\n')

    def test_basic_auth(self):
        assert "Authorization: Basic dXNlcjpwYXNz" in curl_to_http("curl -u user:pass https://h/x")

    def test_url_option(self):
        assert "DELETE https://h/items/1" in curl_to_http("curl --request delete --url https://h/items/1")

    def test_output_parses_back(self):
        http = curl_to_http("curl -X PUT https://h/x -H 'X-Id: 7' -d 'payload'")
        [request] = parse_http_text(http)
        assert request.method == "PUT"
        assert request.uri == "https://h/x"
        assert request.headers == {"X-Id": "7"}
        assert request.body == "payload"

    def test_no_url(self):
        with pytest.raises(ConversionError):
            curl_to_http("curl -X GET")

    def test_missing_option_value(self):
        with pytest.raises(ConversionError):
            curl_to_http("curl https://h/x -H")

    def test_unbalanced_quotes(self):
        with pytest.raises(ConversionError):
            curl_to_http("curl 'https://h/x")


class TestHttpToCurl:
    def test_get_omits_method(self):
        assert request_to_curl(HttpRequest(uri="https://h/x")) == "curl https://h/x"

    def test_post_with_headers_and_body(self):
        request = HttpRequest(
            method="POST",
            uri="https://h/users",
            headers={"Content-Type": "application/json"},
            body='{"name": "John"}',
        )
        assert request_to_curl(request) == (
            "curl -X POST https://h/users -H 'Content-Type: application/json' -d '{\"name\": \"John\"}'"
        )

    def test_multiple_requests(self):
        text = "###\nGET https://h/a\n\n###\nDELETE https://h/b\n"
        assert http_to_curl(text) == "curl https://h/a\n\ncurl -X DELETE https://h/b"

    def test_skips_non_http(self):
        text = "WEBSOCKET ws://h/ws\nhello\n\n###\nGET https://h/a\n"
        assert http_to_curl(text) == "curl https://h/a"

    def test_no_http_requests(self):
        with pytest.raises(ConversionError):
            http_to_curl("GRAPHQL https://h/graphql\n\n{ a }\n")
