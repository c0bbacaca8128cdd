from animeproxy.errors import BadRequestError, NotFoundError, UpstreamError


def test_error_bodies():
    assert BadRequestError("Search query is required").to_dict() == {
        "success": False,
        "message": "Search query is required",
    }
    assert UpstreamError("Error fetching sources", detail="timed out").to_dict() == {
        "success": False,
        "message": "Error fetching sources",
        "error": "timed out",
    }


def test_status_codes():
    assert BadRequestError("x").status_code == 400
    assert NotFoundError("x").status_code == 404
    assert UpstreamError("x").status_code == 500
