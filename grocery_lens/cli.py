"""CLI entry point for grocery recognition."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import load_config
from .errors import ImageValidationError
from .models import load_image
from .normalize import category_display_name
from .pipeline import RecognitionOrchestrator
from .receipt import ReceiptReader
from .vision import create_providers


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="grocery-lens",
        description="Распознавание продуктов по фото и чекам",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="путь к файлу настроек (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="подробный журнал"
    )

    sub = parser.add_subparsers(dest="command")

    # recognize
    rec_parser = sub.add_parser("recognize", help="распознать продукты на фото")
    rec_parser.add_argument("image", type=str, help="файл изображения")
    rec_parser.add_argument("--json", action="store_true", help="вывод в JSON")

    # receipt
    receipt_parser = sub.add_parser("receipt", help="разобрать чек")
    receipt_parser.add_argument(
        "image", type=str, nargs="?", default=None, help="фото чека"
    )
    receipt_parser.add_argument(
        "--text", type=str, default=None, metavar="FILE",
        help="текстовый файл с содержимым чека",
    )
    receipt_parser.add_argument("--json", action="store_true", help="вывод в JSON")

    # providers
    sub.add_parser("providers", help="список настроенных провайдеров")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    try:
        match args.command:
            case "recognize":
                asyncio.run(_cmd_recognize(config, args))
            case "receipt":
                asyncio.run(_cmd_receipt(config, args))
            case "providers":
                _cmd_providers(config)
    except (ImageValidationError, FileNotFoundError, ValueError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def _cmd_providers(config) -> None:
    providers = create_providers(config)
    if not providers:
        print("Нет настроенных провайдеров: будет использован локальный анализ.")
        return
    print(f"Провайдеры распознавания: {len(providers)}")
    for position, provider in enumerate(providers, 1):
        print(f"  {position}. {provider.name}")


async def _cmd_recognize(config, args) -> None:
    image = await load_image(args.image)
    orchestrator = RecognitionOrchestrator(config)

    def progress(stage: str) -> None:
        if not args.json:
            print(f"🔍 {stage}")

    result = await orchestrator.recognize(image, on_progress=progress)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    print(f"\n🥬 Найдено продуктов: {len(result.products)} ({result.provider_used})")
    if result.image_description:
        print(f"   {result.image_description}")
    for p in result.products:
        bar = "█" * int(p.confidence * 10)
        category = category_display_name(p.category)
        print(f"  {p.name:<16} {p.confidence:.0%} {bar}  [{category}]")


async def _cmd_receipt(config, args) -> None:
    if args.text is None and args.image is None:
        raise ValueError("Укажите фото чека или --text FILE")

    reader = ReceiptReader(config)
    if args.text is not None:
        text = await asyncio.to_thread(Path(args.text).read_text, encoding="utf-8")
        result = await reader.read(text=text)
    else:
        print("🧾 Распознаём чек...", file=sys.stderr)
        result = await reader.read(image=await load_image(args.image))

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    if result.store:
        print(f"Магазин: {result.store}")
    if result.date:
        print(f"Дата:    {result.date.isoformat()}")
    if result.total is not None:
        print(f"Итого:   {result.total:.2f}")
    if not result.products:
        print("Товары не найдены.")
        return
    print(f"\nТовары ({len(result.products)}):")
    for name in result.products:
        print(f"  - {name}")
