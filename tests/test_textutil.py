import pytest

from mortarkit.textutil import obfuscate, split_method_and_package


def test_obfuscate_small_input():
    assert obfuscate("1234", 3) == "***"


def test_obfuscate_large_input():
    assert obfuscate("1234567890", 3) == "123***890"


def test_obfuscate_boundary_length_is_fully_masked():
    assert obfuscate("123456789", 3) == "***"


def test_obfuscate_zero_edges():
    assert obfuscate("abcdef", 0) == ""


def test_split_real_grpc_path():
    assert split_method_and_package("/package.Service/Method") == ("/package.Service", "Method")


def test_split_without_slash():
    package_and_service, method_name = split_method_and_package("badPath")
    assert package_and_service == ""
    assert method_name == ""


def test_split_only_slash_gives_unknowns():
    assert split_method_and_package("/") == ("unknown", "unknown")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("package.service/method", ("package.service", "method")),
        ("a/b/c", ("a/b", "c")),
        ("pkg/", ("pkg", "unknown")),
    ],
)
def test_split_variants(name, expected):
    assert split_method_and_package(name) == expected