"""
API HTTP de UniStay (aiohttp).

Expone las colecciones públicas, el panel de administración
(alta/edición con imágenes, baja, estadísticas) y las escrituras
propias del usuario (perfil de roommate, confesiones).
"""

import asyncio
import json
from typing import Optional

import structlog
from aiohttp import web
from aiohttp.web_request import FileField
from pydantic import ValidationError as PydanticValidationError

from unistay.admin import (
    ContentManager,
    ImageWorkflow,
    build_managers,
    build_sections,
    fetch_dashboard_stats,
)
from unistay.auth import is_admin, resolve_user
from unistay.config import Settings, get_settings
from unistay.database import CrudRepository, SupabaseClient
from unistay.errors import StorageError, StoreError, ValidationError
from unistay.models import (
    Confession,
    EntityModel,
    RoommateProfile,
    User,
    build_notifications,
)
from unistay.storage import LocalImage
from unistay.store import CampusStore

logger = structlog.get_logger()


def _json_error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _dump(item: EntityModel) -> dict:
    return item.model_dump(by_alias=True, mode="json")


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Traduce los errores del núcleo a respuestas JSON."""
    try:
        return await handler(request)
    except ValidationError as e:
        return _json_error(400, str(e))
    except (StoreError, StorageError) as e:
        logger.error("Error de backend", path=request.path, error=str(e))
        return _json_error(502, str(e))


def _bearer_token(request: web.Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def _parse_json(request: web.Request) -> dict:
    try:
        body = await request.json()
    except json.JSONDecodeError as e:
        raise ValidationError(f"JSON inválido: {e.msg}") from e
    if not isinstance(body, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return body


async def _parse_content_form(request: web.Request) -> tuple[dict, list]:
    """
    Lee el multipart de un formulario de contenido.

    Campos:
        data: JSON con los campos de la entidad
        keep: URLs de imágenes ya subidas que se conservan (repetible)
        images: archivos nuevos (repetible)
    """
    form = await request.post()

    raw_data = form.get("data") or "{}"
    try:
        fields = json.loads(raw_data)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Campo 'data' inválido: {e.msg}") from e
    if not isinstance(fields, dict):
        raise ValidationError("El campo 'data' debe ser un objeto JSON")

    selection: list = [url for url in form.getall("keep", []) if isinstance(url, str)]
    selection.extend(_local_images(form, "images"))
    return fields, selection


def _local_images(form, name: str) -> list[LocalImage]:
    """Archivos subidos bajo un campo del multipart."""
    return [
        LocalImage(
            filename=upload.filename,
            content=upload.file.read(),
            content_type=upload.content_type,
        )
        for upload in form.getall(name, [])
        if isinstance(upload, FileField)
    ]


def create_app(
    client: SupabaseClient,
    repositories: dict[str, CrudRepository],
    store: Optional[CampusStore] = None,
    images: Optional[ImageWorkflow] = None,
    settings: Optional[Settings] = None,
    load_on_startup: bool = True,
) -> web.Application:
    """Arma la aplicación aiohttp con sus rutas."""
    settings = settings or get_settings()
    store = store or CampusStore(repositories)
    images = images or ImageWorkflow()
    sections = build_sections(repositories)
    # Managers compartidos: los deletes en vuelo se ven entre requests
    managers = build_managers(sections, store, images)

    app = web.Application(
        middlewares=[error_middleware],
        client_max_size=settings.max_upload_mb * 1024 * 1024,
    )

    async def current_user(request: web.Request) -> Optional[User]:
        return await asyncio.to_thread(resolve_user, client, _bearer_token(request))

    async def require_user(request: web.Request) -> User:
        user = await current_user(request)
        if user is None:
            raise web.HTTPUnauthorized(
                text=json.dumps({"error": "unauthenticated"}),
                content_type="application/json",
            )
        return user

    async def require_admin(request: web.Request) -> User:
        user = await require_user(request)
        if not is_admin(user, settings):
            logger.warning("Acceso admin denegado", email=user.email)
            raise web.HTTPForbidden(
                text=json.dumps({"error": "forbidden"}),
                content_type="application/json",
            )
        return user

    def section_for(request: web.Request):
        kind = request.match_info["kind"]
        if kind not in sections:
            raise web.HTTPNotFound(
                text=json.dumps({"error": f"unknown_section:{kind}"}),
                content_type="application/json",
            )
        return sections[kind]

    async def health(_: web.Request) -> web.Response:
        return web.Response(text="ok")

    async def list_collection(request: web.Request) -> web.Response:
        kind = request.match_info["kind"]
        if kind not in store.kinds:
            return _json_error(404, f"unknown_collection:{kind}")

        items = store.get(kind)
        university_id = request.query.get("universityId")
        if university_id:
            items = [
                item for item in items
                if getattr(item, "university_id", None) == university_id
            ]
        return web.json_response([_dump(item) for item in items])

    async def stats(request: web.Request) -> web.Response:
        await require_admin(request)
        return web.json_response(await fetch_dashboard_stats(repositories))

    async def notifications(request: web.Request) -> web.Response:
        user = await require_user(request)
        notifs = build_notifications(
            user,
            news=store.get("news"),
            jobs=store.get("jobs"),
            profiles=store.get("profiles"),
        )
        return web.json_response([n.model_dump(mode="json") for n in notifs])

    async def save_content(request: web.Request) -> web.Response:
        await require_admin(request)
        section = section_for(request)
        fields, selection = await _parse_content_form(request)

        # Un manager por request: cada formulario tiene su propio estado
        manager: ContentManager = ContentManager(
            section, on_data_change=store.on_data_change, images=images
        )

        record_id = request.match_info.get("id")
        if record_id:
            existing = await asyncio.to_thread(section.repository.get_by_id, record_id)
            if existing is None:
                return _json_error(404, f"not_found:{record_id}")
            manager.start_edit(existing)
        else:
            manager.start_add()

        saved = await manager.submit(fields, selection)
        if saved is None:
            raise manager.last_error or StoreError(
                "Submit fallido", section.repository.TABLE, "save"
            )
        return web.json_response(_dump(saved), status=200 if record_id else 201)

    async def delete_content(request: web.Request) -> web.Response:
        await require_admin(request)
        section = section_for(request)
        manager = managers[section.kind]
        record_id = request.match_info["id"]

        if record_id in manager.deleting_ids:
            return _json_error(409, "delete_in_progress")

        if not await manager.delete(record_id):
            if manager.last_error is not None:
                raise manager.last_error
            return _json_error(409, "delete_in_progress")
        return web.Response(status=204)

    async def save_own_profile(request: web.Request) -> web.Response:
        user = await require_user(request)
        body = await _parse_json(request)
        repo = repositories["profiles"]

        fields = RoommateProfile.normalize_fields(body)
        existing = await asyncio.to_thread(repo.get_by_id, user.id)
        # set reemplaza la fila completa: lo que no viene se conserva del perfil guardado
        data = {**(existing.model_dump() if existing else {}), **fields, "id": user.id}
        if not data.get("email"):
            data["email"] = user.email or ""
        try:
            profile = RoommateProfile.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Perfil inválido: {e.error_count()} errores") from e

        await asyncio.to_thread(repo.set, profile)
        await store.on_data_change("profiles")
        return web.json_response(_dump(profile))

    async def save_own_photo(request: web.Request) -> web.Response:
        user = await require_user(request)
        form = await request.post()
        photos = _local_images(form, "photo")[:1]
        images.validate(photos)

        repo = repositories["profiles"]
        existing = await asyncio.to_thread(repo.get_by_id, user.id)
        if existing is None:
            return _json_error(404, "profile_not_found")

        uploaded = await images.upload(photos, "profiles", user.id)
        await asyncio.to_thread(repo.update, user.id, {"imageUrl": uploaded.primary_url})
        await images.cleanup(
            existing.stored_image_urls(), uploaded.image_urls, "profiles"
        )
        logger.info("Foto de perfil actualizada", user_id=user.id)

        await store.on_data_change("profiles")
        profile = existing.model_copy(update={"image_url": uploaded.primary_url})
        return web.json_response(_dump(profile))

    async def post_confession(request: web.Request) -> web.Response:
        body = await _parse_json(request)
        fields = Confession.normalize_fields(body)
        # Likes y fecha los pone el servidor
        fields.pop("likes", None)
        fields.pop("created_at", None)
        try:
            confession = Confession.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError(f"Confesión inválida: {e.error_count()} errores") from e

        created = await asyncio.to_thread(repositories["confessions"].add, confession)
        await store.on_data_change("confessions")
        return web.json_response(_dump(created), status=201)

    async def like_confession(request: web.Request) -> web.Response:
        confession_id = request.match_info["id"]
        likes = await asyncio.to_thread(repositories["confessions"].like, confession_id)
        if likes == 0:
            return _json_error(404, f"not_found:{confession_id}")
        await store.on_data_change("confessions")
        return web.json_response({"id": confession_id, "likes": likes})

    async def load_store(_: web.Application) -> None:
        try:
            await store.load()
        except StoreError as e:
            # La API arranca igual; las colecciones quedan vacías hasta el próximo refresh
            logger.error("Error en la carga inicial", error=str(e))

    app.router.add_get("/health", health)
    app.router.add_get("/api/stats", stats)
    app.router.add_get("/api/notifications", notifications)
    app.router.add_put("/api/profiles/me", save_own_profile)
    app.router.add_put("/api/profiles/me/photo", save_own_photo)
    app.router.add_post("/api/confessions", post_confession)
    app.router.add_post("/api/confessions/{id}/like", like_confession)
    app.router.add_post("/api/admin/{kind}", save_content)
    app.router.add_put("/api/admin/{kind}/{id}", save_content)
    app.router.add_delete("/api/admin/{kind}/{id}", delete_content)
    app.router.add_get("/api/{kind}", list_collection)

    if load_on_startup:
        app.on_startup.append(load_store)

    return app
