import unittest

from pydantic import ValidationError

from src.domain.exceptions import DecodeException, InvalidRuntimeFormatException
from src.domain.models import CreateMovieInput, Movie
from src.domain.runtime import decode_runtime, encode_runtime, parse_runtime


class TestEncodeRuntime(unittest.TestCase):
    def test_encode_produces_quoted_string(self) -> None:
        self.assertEqual(encode_runtime(102), '"102 mins"')

    def test_encode_does_not_reject_negative_values(self) -> None:
        self.assertEqual(encode_runtime(-5), '"-5 mins"')

    def test_decode_reverses_encode(self) -> None:
        for value in (0, 1, 102, 2 ** 31 - 1):
            self.assertEqual(decode_runtime(encode_runtime(value)), value)


class TestDecodeRuntime(unittest.TestCase):
    def test_decode_accepts_bytes(self) -> None:
        self.assertEqual(decode_runtime(b'"90 mins"'), 90)

    def test_decode_keeps_semantically_invalid_values(self) -> None:
        # Range checks belong to validation, not to the codec.
        self.assertEqual(decode_runtime('"-10 mins"'), -10)
        self.assertEqual(decode_runtime('"0 mins"'), 0)

    def test_decode_rejects_malformed_input(self) -> None:
        bad_values = [
            '"102mins"',
            '"abc mins"',
            '102 mins',
            '"102 minutes"',
            '"102  mins"',
            '" 102 mins"',
            '"102 mins "',
            '"mins"',
            '" mins"',
            '102',
            '""',
            '"102 mins',
            '"2147483648 mins"',
            '"1_000 mins"',
        ]
        for raw in bad_values:
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidRuntimeFormatException):
                    decode_runtime(raw)

    def test_format_error_is_a_decode_error(self) -> None:
        with self.assertRaises(DecodeException):
            parse_runtime("ten mins")


class TestRuntimeField(unittest.TestCase):
    def test_movie_json_uses_wire_format(self) -> None:
        movie = Movie(id=1, title="Casablanca", runtime=102, version=1)

        self.assertEqual(movie.model_dump(mode="json")["runtime"], "102 mins")
        self.assertEqual(movie.model_dump()["runtime"], 102)

    def test_input_decodes_wire_format(self) -> None:
        data = CreateMovieInput.model_validate({"runtime": "102 mins"})

        self.assertEqual(data.runtime, 102)

    def test_input_rejects_json_number(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            CreateMovieInput.model_validate({"runtime": 102})

        self.assertEqual(ctx.exception.errors()[0]["type"], "invalid_runtime_format")
