import httpx
import pytest

from onecode.core.errors import BadInput
from onecode.exercises.codec import combine_code_with_tests, decode_code, encode_code
from onecode.exercises.compiler import ExecutionClient, route_for_language


def test_language_routes() -> None:
    assert route_for_language("Python") == "compile_py"
    assert route_for_language("C++") == "compile_cpp"
    assert route_for_language("Brainfuck") == ""


def test_codec() -> None:
    assert decode_code(encode_code("print('hi')")) == "print('hi')"
    assert combine_code_with_tests("a", "b") == "a\n\nb"
    with pytest.raises(BadInput):
        decode_code("not base64!")
    with pytest.raises(BadInput):
        decode_code(encode_code("x")[:-1])


async def test_output_is_returned(fake_compiler) -> None:
    fake_compiler.output = "Passed:1:t"
    result = await ExecutionClient(fake_compiler.client()).run("Y29kZQ==", "C++")
    assert (result.output, result.error) == ("Passed:1:t", None)
    assert fake_compiler.requests[0].url.path == "/compile_cpp"


async def test_error_wins_over_output(fake_compiler) -> None:
    fake_compiler.output = "partial"
    fake_compiler.error = "boom"
    result = await ExecutionClient(fake_compiler.client()).run("Y29kZQ==", "Python")
    assert (result.output, result.error) == (None, "boom")


async def test_unknown_language_is_bad_input_without_dispatch(fake_compiler) -> None:
    with pytest.raises(BadInput):
        await ExecutionClient(fake_compiler.client()).run("Y29kZQ==", "Cobol")
    assert fake_compiler.requests == []


async def test_transport_failure_is_bad_input() -> None:
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://compiler.test")
    with pytest.raises(BadInput):
        await ExecutionClient(client).run("Y29kZQ==", "Python")


async def test_missing_envelope_is_bad_input() -> None:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"unexpected": True})),
        base_url="http://compiler.test",
    )
    with pytest.raises(BadInput):
        await ExecutionClient(client).run("Y29kZQ==", "Python")
