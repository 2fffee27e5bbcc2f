"""Tests for the DM map endpoints."""

import pytest

from aosha.auth.models import UserRole


class TestMapRoutes:
    """Map CRUD over HTTP."""

    @pytest.mark.asyncio
    async def test_create_map(self, client, bearer, dm_token, dm_user, map_asset):
        response = await client.post(
            "/api/maps",
            headers=bearer(dm_token),
            json={"name": "  Sunken Crypt ", "map_asset_id": map_asset.id, "grid_enabled": True},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Sunken Crypt"
        assert body["dm_id"] == dm_user.id
        assert body["grid_size_pixels"] == 50
        assert body["mapAssetUrl"] == "/uploads/assets/keep.png"

    @pytest.mark.asyncio
    async def test_create_map_unknown_asset(self, client, bearer, dm_token):
        response = await client.post(
            "/api/maps", headers=bearer(dm_token), json={"name": "Void", "map_asset_id": 404}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_map_blank_name(self, client, bearer, dm_token, map_asset):
        response = await client.post(
            "/api/maps", headers=bearer(dm_token), json={"name": "   ", "map_asset_id": map_asset.id}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_maps_sorted_by_name(self, client, bearer, dm_token, dm_user, map_repo, game_map, map_asset):
        await map_repo.create_map(dm_user.id, "Abandoned Mine", map_asset.id)

        response = await client.get("/api/maps", headers=bearer(dm_token))

        assert response.status_code == 200
        assert [m["name"] for m in response.json()] == ["Abandoned Mine", "Ruined Keep"]

    @pytest.mark.asyncio
    async def test_players_are_forbidden(self, client, bearer, player_token, game_map):
        response = await client.get("/api/maps", headers=bearer(player_token))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_token_required(self, client, game_map):
        response = await client.get(f"/api/maps/{game_map.id}")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_detail_includes_hidden_elements_and_fog(
        self, client, bearer, dm_token, dm_user, map_repo, game_map, element_fields
    ):
        hidden = await map_repo.create_element(game_map.id, dm_user.id, element_fields("pin", visible=False))
        await map_repo.save_fog_document(game_map.id, dm_user.id, '[{"x": 0.5}]')

        response = await client.get(f"/api/maps/{game_map.id}", headers=bearer(dm_token))

        assert response.status_code == 200
        body = response.json()
        assert body["fog_data_json"] == '[{"x": 0.5}]'
        assert [e["id"] for e in body["elements"]] == [hidden.id]
        assert body["elements"][0]["is_visible_to_players"] is False

    @pytest.mark.asyncio
    async def test_update_map(self, client, bearer, dm_token, game_map):
        response = await client.put(
            f"/api/maps/{game_map.id}", headers=bearer(dm_token), json={"grid_size_pixels": 32}
        )

        assert response.status_code == 200
        assert response.json()["grid_size_pixels"] == 32
        assert response.json()["name"] == "Ruined Keep"

    @pytest.mark.asyncio
    async def test_update_map_empty_body(self, client, bearer, dm_token, game_map):
        response = await client.put(f"/api/maps/{game_map.id}", headers=bearer(dm_token), json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "No update data provided."

    @pytest.mark.asyncio
    async def test_other_dm_cannot_see_or_change_map(self, client, bearer, token_for, other_dm_user, game_map):
        rival = bearer(token_for(other_dm_user.id, other_dm_user.username, UserRole.DM))

        assert (await client.get(f"/api/maps/{game_map.id}", headers=rival)).status_code == 404
        assert (
            await client.put(f"/api/maps/{game_map.id}", headers=rival, json={"name": "Mine"})
        ).status_code == 404
        assert (await client.delete(f"/api/maps/{game_map.id}", headers=rival)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_map(self, client, bearer, dm_token, map_repo, game_map):
        response = await client.delete(f"/api/maps/{game_map.id}", headers=bearer(dm_token))

        assert response.status_code == 200
        assert response.json() == {"message": "Map deleted successfully."}
        assert await map_repo.map_exists(game_map.id) is False


class TestFogRoute:
    """PUT /api/maps/{id}/fog."""

    @pytest.mark.asyncio
    async def test_save_fog(self, client, bearer, dm_token, map_repo, game_map):
        fog = '[{"type": "rect", "x": 0, "y": 0, "w": 1, "h": 0.5}]'

        response = await client.put(
            f"/api/maps/{game_map.id}/fog", headers=bearer(dm_token), json={"fog_data_json": fog}
        )

        assert response.status_code == 200
        assert await map_repo.get_fog_document(game_map.id) == fog

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fog, detail",
        [
            ("[oops", "Invalid JSON format for fog_data_json."),
            ('{"x": 1}', "fog_data_json must represent a valid JSON array."),
        ],
    )
    async def test_rejects_bad_fog(self, client, bearer, dm_token, map_repo, game_map, fog, detail):
        response = await client.put(
            f"/api/maps/{game_map.id}/fog", headers=bearer(dm_token), json={"fog_data_json": fog}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == detail
        assert await map_repo.get_fog_document(game_map.id) == "[]"


class TestElementRoutes:
    """Element CRUD over HTTP."""

    @pytest.mark.asyncio
    async def test_create_element(self, client, bearer, dm_token, game_map):
        response = await client.post(
            f"/api/maps/{game_map.id}/elements",
            headers=bearer(dm_token),
            json={
                "element_type": "area",
                "x_coord_percent": 0.1,
                "y_coord_percent": 0.2,
                "width_percent": 0.3,
                "height_percent": 0.4,
                "label": "Collapsed hall",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["map_id"] == game_map.id
        assert body["is_visible_to_players"] is False
        assert body["element_data"] == {}

    @pytest.mark.asyncio
    async def test_pin_requires_icon(self, client, bearer, dm_token, game_map):
        response = await client.post(
            f"/api/maps/{game_map.id}/elements",
            headers=bearer(dm_token),
            json={"element_type": "pin", "x_coord_percent": 0.5, "y_coord_percent": 0.5},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_coordinates_must_be_fractions(self, client, bearer, dm_token, game_map):
        response = await client.post(
            f"/api/maps/{game_map.id}/elements",
            headers=bearer(dm_token),
            json={"element_type": "text", "x_coord_percent": 1.5, "y_coord_percent": 0.5},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_filters_by_type(self, client, bearer, dm_token, dm_user, map_repo, game_map, element_fields):
        await map_repo.create_element(game_map.id, dm_user.id, element_fields("pin"))
        text = await map_repo.create_element(game_map.id, dm_user.id, element_fields("text"))

        response = await client.get(
            f"/api/maps/{game_map.id}/elements", headers=bearer(dm_token), params={"type": "text"}
        )
        bad = await client.get(
            f"/api/maps/{game_map.id}/elements", headers=bearer(dm_token), params={"type": "door"}
        )

        assert [e["id"] for e in response.json()] == [text.id]
        assert bad.status_code == 400

    @pytest.mark.asyncio
    async def test_update_element_clears_width(
        self, client, bearer, dm_token, dm_user, map_repo, game_map, element_fields
    ):
        element = await map_repo.create_element(
            game_map.id, dm_user.id, element_fields("area", width_percent=0.2, height_percent=0.2)
        )

        response = await client.put(
            f"/api/maps/{game_map.id}/elements/{element.id}",
            headers=bearer(dm_token),
            json={"width_percent": None, "label": None, "is_visible_to_players": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["width_percent"] is None
        assert body["height_percent"] == 0.2
        assert body["label"] == "area label"
        assert body["is_visible_to_players"] is True

    @pytest.mark.asyncio
    async def test_update_element_empty_body(self, client, bearer, dm_token, dm_user, map_repo, game_map, element_fields):
        element = await map_repo.create_element(game_map.id, dm_user.id, element_fields())

        response = await client.put(
            f"/api/maps/{game_map.id}/elements/{element.id}", headers=bearer(dm_token), json={}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_element_of_another_map_is_not_found(
        self, client, bearer, dm_token, dm_user, map_repo, game_map, map_asset, element_fields
    ):
        other_map = await map_repo.create_map(dm_user.id, "Second", map_asset.id)
        element = await map_repo.create_element(game_map.id, dm_user.id, element_fields())

        response = await client.put(
            f"/api/maps/{other_map.id}/elements/{element.id}",
            headers=bearer(dm_token),
            json={"label": "moved"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_element(self, client, bearer, dm_token, dm_user, map_repo, game_map, element_fields):
        element = await map_repo.create_element(game_map.id, dm_user.id, element_fields())

        response = await client.delete(
            f"/api/maps/{game_map.id}/elements/{element.id}", headers=bearer(dm_token)
        )
        again = await client.delete(
            f"/api/maps/{game_map.id}/elements/{element.id}", headers=bearer(dm_token)
        )

        assert response.json() == {"message": "Element deleted successfully."}
        assert again.status_code == 404
