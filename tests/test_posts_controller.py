"""Tests for PostsController validation and error classification.

The service collaborator is a MagicMock so every outcome (rows, None,
format violation, generic failure) can be forced per test.
"""

from unittest.mock import MagicMock

import pytest
from backend.app.core.errors import (
    BadFormatError,
    BadInputError,
    InternalError,
    NotFoundError,
    PostErrorKind,
)
from backend.app.models.posts import Post, PostCreate, PostUpdate
from backend.app.services.post_service import InvalidPostIdError, PostNotFoundError
from backend.app.services.posts_controller import (
    MSG_CREATED,
    MSG_REMOVED,
    MSG_UPDATED,
    PostsController,
)
from sqlalchemy.exc import DataError

POST_ID = "123"

DTO = PostCreate(
    id="1",
    title="first post",
    content="content from the first post",
    user_id=1,
)

SINGLE_POST = Post(id="1", title="first post", content="content", user_id=1)


@pytest.fixture()
def service() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def controller(service: MagicMock) -> PostsController:
    return PostsController(service)


def _data_error() -> DataError:
    return DataError(
        "SELECT posts.id FROM posts WHERE posts.id = %(pk)s",
        {"pk": "invalid-id"},
        Exception('invalid input syntax for type uuid: "invalid-id"'),
    )


# ---------------------------------------------------------------------------
# find_all / find_all_admin
# ---------------------------------------------------------------------------


class TestFindAll:
    def test_returns_service_result(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        posts = [SINGLE_POST]
        service.find_all.return_value = posts
        assert controller.find_all() is posts
        service.find_all.assert_called_once_with()

    def test_service_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_all.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.find_all()

    def test_format_error_in_listing_is_still_internal(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_all.side_effect = _data_error()
        with pytest.raises(InternalError):
            controller.find_all()


class TestFindAllAdmin:
    def test_uses_service_find_all(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_all.return_value = []
        assert controller.find_all_admin() == []
        service.find_all.assert_called_once_with()

    def test_service_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_all.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.find_all_admin()


# ---------------------------------------------------------------------------
# filter
# ---------------------------------------------------------------------------


class TestFilter:
    def test_passes_term_to_service(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.filter.return_value = [SINGLE_POST]
        assert controller.filter("searchTerm") == [SINGLE_POST]
        service.filter.assert_called_once_with("searchTerm")

    def test_empty_term_is_forwarded(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.filter.return_value = []
        controller.filter("")
        service.filter.assert_called_once_with("")

    def test_service_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.filter.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.filter("searchTerm")


# ---------------------------------------------------------------------------
# find_one
# ---------------------------------------------------------------------------


class TestFindOne:
    def test_returns_post(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        assert controller.find_one(POST_ID) is SINGLE_POST
        service.find_one.assert_called_once_with(POST_ID)

    def test_absent_post_returns_none(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = None
        assert controller.find_one(POST_ID) is None

    def test_service_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.find_one(POST_ID)

    def test_invalid_id_is_bad_format(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = InvalidPostIdError("invalid-id")
        with pytest.raises(BadFormatError, match="Formato inválido do ID."):
            controller.find_one("invalid-id")

    def test_database_data_error_is_bad_format(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = _data_error()
        with pytest.raises(BadFormatError) as exc_info:
            controller.find_one("invalid-id")
        assert exc_info.value.message == "Formato inválido do ID."


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_returns_confirmation_and_passes_payload(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        assert controller.create(DTO) == "Post criado com sucesso!"
        assert MSG_CREATED == "Post criado com sucesso!"
        service.create.assert_called_once_with(DTO)

    def test_service_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.create.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.create(DTO)

    def test_invalid_supplied_id_is_internal(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.create.side_effect = InvalidPostIdError("invalid post id: '1'")
        with pytest.raises(InternalError, match="invalid post id"):
            controller.create(DTO)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_updates_and_returns_confirmation(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        payload = PostUpdate(title=DTO.title)

        assert controller.update(POST_ID, payload) == "Post atualizado com sucesso!"
        assert MSG_UPDATED == "Post atualizado com sucesso!"
        service.find_one.assert_called_once_with(POST_ID)
        service.update.assert_called_once_with(POST_ID, payload)

    def test_write_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        service.update.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.update(POST_ID, PostUpdate(title=DTO.title))

    def test_empty_payload_is_bad_input_without_lookup(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        with pytest.raises(
            BadInputError,
            match="Nenhum dado a ser atualizado. Confira as propriedades informadas.",
        ):
            controller.update(POST_ID, PostUpdate())
        service.find_one.assert_not_called()
        service.update.assert_not_called()

    def test_unknown_keys_only_is_bad_input(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        payload = PostUpdate.model_validate({"user_id": 2, "foo": "bar"})
        with pytest.raises(BadInputError):
            controller.update(POST_ID, payload)
        service.find_one.assert_not_called()

    def test_blank_fields_are_bad_input(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        with pytest.raises(BadInputError):
            controller.update(POST_ID, PostUpdate(title="", content="   "))
        service.find_one.assert_not_called()

    def test_bad_input_wins_over_malformed_id(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = InvalidPostIdError("invalid-id")
        with pytest.raises(BadInputError):
            controller.update("invalid-id", PostUpdate())
        service.find_one.assert_not_called()

    def test_absent_post_is_not_found(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = None
        with pytest.raises(NotFoundError):
            controller.update(POST_ID, PostUpdate(title=DTO.title))
        service.update.assert_not_called()

    def test_invalid_id_is_bad_format(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = InvalidPostIdError("invalid-id")
        with pytest.raises(BadFormatError, match="Formato inválido do ID."):
            controller.update("invalid-id", PostUpdate(title=DTO.title, content=DTO.content))
        service.update.assert_not_called()

    def test_lookup_generic_error_is_internal(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = RuntimeError("connection refused")
        with pytest.raises(InternalError, match="connection refused"):
            controller.update(POST_ID, PostUpdate(title=DTO.title))
        service.update.assert_not_called()

    def test_row_vanishing_before_write_is_not_found(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        service.update.side_effect = PostNotFoundError("gone")
        with pytest.raises(NotFoundError):
            controller.update(POST_ID, PostUpdate(content="new"))


# ---------------------------------------------------------------------------
# remove
# ---------------------------------------------------------------------------


class TestRemove:
    def test_removes_and_returns_confirmation(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        assert controller.remove(POST_ID) == "Post excluído com sucesso!"
        assert MSG_REMOVED == "Post excluído com sucesso!"
        service.remove.assert_called_once_with(POST_ID)

    def test_write_error_is_internal_with_message(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        service.remove.side_effect = Exception("Service Error")
        with pytest.raises(InternalError, match="Service Error"):
            controller.remove(POST_ID)

    def test_absent_post_is_not_found_and_delete_skipped(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = None
        with pytest.raises(NotFoundError):
            controller.remove(POST_ID)
        service.remove.assert_not_called()

    def test_invalid_id_is_bad_format(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = InvalidPostIdError("invalid-id")
        with pytest.raises(BadFormatError, match="Formato inválido do ID."):
            controller.remove("invalid-id")
        service.remove.assert_not_called()

    def test_lookup_generic_error_is_internal(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.side_effect = RuntimeError("db down")
        with pytest.raises(InternalError, match="db down"):
            controller.remove(POST_ID)
        service.remove.assert_not_called()

    def test_row_vanishing_before_delete_is_not_found(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = SINGLE_POST
        service.remove.side_effect = PostNotFoundError("gone")
        with pytest.raises(NotFoundError):
            controller.remove(POST_ID)
        service.remove.assert_called_once_with(POST_ID)


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------


class TestErrorKinds:
    def test_each_error_carries_its_kind(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        service.find_one.return_value = None
        with pytest.raises(NotFoundError) as not_found:
            controller.remove(POST_ID)
        assert not_found.value.kind is PostErrorKind.not_found

        with pytest.raises(BadInputError) as bad_input:
            controller.update(POST_ID, PostUpdate())
        assert bad_input.value.kind is PostErrorKind.bad_input

    def test_internal_error_chains_original(
        self, controller: PostsController, service: MagicMock,
    ) -> None:
        original = Exception("Service Error")
        service.find_all.side_effect = original
        with pytest.raises(InternalError) as exc_info:
            controller.find_all()
        assert exc_info.value.__cause__ is original
        assert exc_info.value.kind is PostErrorKind.internal
