from typing import Annotated

from fastapi import APIRouter, Query, Request, Response

from api.schemas import ErrorResponse
from domain.exceptions.valuation import RenderError
from infrastructure.rendering.avatar import AvatarOptions, build_avatar_svg
from infrastructure.rendering.png import svg_to_png
from infrastructure.rendering.qr import QROptions, render_qr

router = APIRouter(tags=['images'])

NO_CACHE = {'Cache-Control': 'no-cache'}


@router.get(
	'/svgsc',
	summary='Render a gradient avatar ring as SVG',
	response_class=Response,
	responses={200: {'content': {'image/svg+xml': {}}}, 400: {'model': ErrorResponse}},
)
async def avatar_svg(request: Request) -> Response:
	svg = build_avatar_svg(AvatarOptions.from_query(dict(request.query_params)))
	return Response(content=svg, media_type='image/svg+xml', headers=NO_CACHE)


@router.get(
	'/svgsc.png',
	summary='Render a gradient avatar ring as PNG',
	response_class=Response,
	responses={
		200: {'content': {'image/png': {}}},
		400: {'model': ErrorResponse},
		500: {'model': ErrorResponse},
	},
)
async def avatar_png(request: Request) -> Response:
	svg = build_avatar_svg(AvatarOptions.from_query(dict(request.query_params)))
	return Response(content=svg_to_png(svg), media_type='image/png', headers=NO_CACHE)


@router.get(
	'/ewm',
	summary='Generate a QR code',
	response_class=Response,
	responses={
		200: {'content': {'image/png': {}, 'image/svg+xml': {}}},
		400: {'model': ErrorResponse},
		500: {'model': ErrorResponse},
	},
)
async def qr_code(
	text: str | None = None,
	data: str | None = None,
	url: str | None = None,
	output_format: Annotated[str, Query(alias='format')] = 'png',
	size: str | None = None,
	margin: str | None = None,
	dark: str = '#000000',
	light: str = '#ffffff',
) -> Response:
	content = (text or data or url or '').strip()
	if not content:
		raise RenderError('Missing QR code content: provide text, data or url')

	options = QROptions.from_query(
		content, output=output_format, size=size, margin=margin, dark=dark, light=light
	)
	body, media_type = render_qr(options)
	return Response(content=body, media_type=media_type, headers=NO_CACHE)
