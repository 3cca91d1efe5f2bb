import pytest

import purple_auth as m


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, m.ErrorKind.AUTHENTICATION_FAILURE),
        (403, m.ErrorKind.AUTHENTICATION_FAILURE),
        (404, m.ErrorKind.NOT_FOUND),
        (422, m.ErrorKind.VALIDATION_ERROR),
        (500, m.ErrorKind.SERVER_ERROR),
    ],
)
def test_mapped_statuses(status: int, kind: m.ErrorKind):
    assert m.error_for_status(status) is kind


@pytest.mark.parametrize("status", [201, 302, 400, 409, 429, 502, 503])
def test_unmapped_statuses_are_unknown(status: int):
    assert m.error_for_status(status) is m.ErrorKind.UNKNOWN_ERROR


def test_error_kind_values_are_snake_case_names():
    assert m.ErrorKind.TOKEN_NOT_YET_VALID == "token_not_yet_valid"
    assert str(m.ErrorKind.SIGNATURE_ERROR) == "signature_error"
