"""Small string helpers for gRPC method names and secret masking."""

UNKNOWN = "unknown"


def split_method_and_package(full_method_name: str) -> tuple[str, str]:
    """Split a gRPC ``package.service/method`` name into its two parts.

    Returns ``("", "")`` when the name has no slash. An empty part becomes
    ``"unknown"``.
    """
    index = full_method_name.rfind("/")
    if index < 0:
        return "", ""
    package_and_service = full_method_name[:index] or UNKNOWN
    method_name = full_method_name[index + 1 :] or UNKNOWN
    return package_and_service, method_name


def obfuscate(text: str, edges_length: int) -> str:
    """Hide the middle of ``text``, keeping ``edges_length`` characters at each end.

    Text too short to keep a middle part at least as long as an edge is
    replaced by ``edges_length`` asterisks.
    """
    mask = "*" * edges_length
    if len(text) > edges_length * 3:
        return text[:edges_length] + mask + text[len(text) - edges_length :]
    return mask