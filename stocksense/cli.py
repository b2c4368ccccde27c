from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from stocksense.config import AppConfig
from stocksense.core.errors import ConfigurationError, StockSenseError
from stocksense.core.types import Position
from stocksense.infra.db.session import init_db
from stocksense.modules.admin.schemas import ManualAdCreateRequest, ManualSuggestionCreateRequest
from stocksense.modules.admin.service import AdminDataService
from stocksense.modules.analysis_engine.service import StockAnalysisService
from stocksense.modules.tracking.service import TrackingService, search_details
from stocksense.services.config_store import ConfigStore
from stocksense.settings import AppSettings

app = typer.Typer(help="StockSense CLI")
console = Console()

providers_app = typer.Typer(help="Manage analysis providers")
ads_app = typer.Typer(help="Manage manual ads")
suggestions_app = typer.Typer(help="Manage pro tip suggestions")
logs_app = typer.Typer(help="Inspect activity logs")
admin_app = typer.Typer(help="Admin credentials")
app.add_typer(providers_app, name="providers")
app.add_typer(ads_app, name="ads")
app.add_typer(suggestions_app, name="suggestions")
app.add_typer(logs_app, name="logs")
app.add_typer(admin_app, name="admin")


@app.callback()
def main() -> None:
    settings = AppSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _store() -> ConfigStore:
    return ConfigStore(config_path=AppSettings().config_file)


def _load_config() -> AppConfig:
    config = _store().load()
    init_db(config.database.url)
    return config


def _fail(exc: StockSenseError) -> None:
    label = "Setup required" if isinstance(exc, ConfigurationError) else "Error"
    console.print(f"[red]{label}:[/red] {exc}")
    raise typer.Exit(code=2 if isinstance(exc, ConfigurationError) else 1)


@app.command("init-config")
def init_config() -> None:
    store = _store()
    config = store.save(store.load())
    init_db(config.database.url)
    console.print(f"[green]Config initialized:[/green] {store.config_path.resolve()}")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host, default from settings."),
    port: Optional[int] = typer.Option(None, help="Bind port, default from settings."),
    reload: bool = typer.Option(False, help="Enable autoreload mode."),
) -> None:
    settings = AppSettings()
    uvicorn.run(
        "stocksense.api:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command("quote")
def quote(
    symbol: str = typer.Argument(..., help="Ticker symbol, e.g. RELIANCE."),
    provider_id: Optional[str] = typer.Option(None, help="Override analysis provider id."),
) -> None:
    service = StockAnalysisService(config=_load_config(), settings=AppSettings())
    try:
        result = asyncio.run(service.get_stock_quote(symbol, provider_id=provider_id))
    except StockSenseError as exc:
        _fail(exc)
        return

    table = Table(title=f"Quote {result.symbol}")
    table.add_column("Current")
    table.add_column("Suggested buy")
    table.add_column("Suggested sell")
    table.add_row(f"{result.current_price:,.2f}", f"{result.suggested_buy:,.2f}", f"{result.suggested_sell:,.2f}")
    console.print(table)
    for source in result.sources:
        console.print(f"- {source.title}: {source.uri}")


@app.command("analyze")
def analyze(
    symbol: str = typer.Argument(..., help="Ticker symbol."),
    buy_price: float = typer.Option(..., help="Average buy price."),
    quantity: float = typer.Option(..., help="Units held."),
    strategy: str = typer.Option("long-term", help="intraday|long-term"),
    email: Optional[str] = typer.Option(None, help="Record the search under this user."),
    provider_id: Optional[str] = typer.Option(None, help="Override analysis provider id."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    if strategy not in ("intraday", "long-term"):
        raise typer.BadParameter(f"Unknown strategy: {strategy}")
    config = _load_config()
    position = Position(symbol=symbol, buy_price=buy_price, quantity=quantity, strategy=strategy)
    if email:
        TrackingService(config).log_activity(email=email, action="SEARCH_STOCK", details=search_details(position.symbol))

    service = StockAnalysisService(config=config, settings=AppSettings())
    try:
        result = asyncio.run(service.analyze_stock_position(position, provider_id=provider_id))
    except StockSenseError as exc:
        _fail(exc)
        return

    if as_json:
        console.print(
            json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2),
            markup=False,
            highlight=False,
        )
        return

    console.print(Markdown(result.analysis_text))
    if result.recommendation is not None:
        rec = result.recommendation
        console.print(f"[bold]Signal:[/bold] {rec.signal} @ {rec.price:,.2f} - {rec.reason}")
    if result.current_price_estimate is not None:
        console.print(f"[bold]Estimated price:[/bold] {result.current_price_estimate:,.2f} ({result.sentiment})")
    if result.news:
        table = Table(title="News")
        table.add_column("Headline")
        table.add_column("Summary")
        table.add_column("Sentiment")
        for item in result.news:
            table.add_row(item.headline, item.summary, item.sentiment)
        console.print(table)
    if result.chart_data:
        console.print("Forecast: " + ", ".join(f"{p.label}={p.price:,.2f}" for p in result.chart_data))


@providers_app.command("list")
def providers_list() -> None:
    service = StockAnalysisService(config=_load_config(), settings=AppSettings())
    table = Table(title="Analysis Providers")
    table.add_column("Provider ID")
    table.add_column("Type")
    table.add_column("Models")
    table.add_column("Status")
    table.add_column("Default")
    for provider in service.list_providers():
        table.add_row(
            provider.provider_id,
            provider.type,
            ", ".join(provider.models),
            provider.status,
            "yes" if provider.is_default else "",
        )
    console.print(table)


@providers_app.command("set-default")
def providers_set_default(provider: str = typer.Option(..., help="Provider ID")) -> None:
    try:
        _store().set_default_provider(provider)
    except StockSenseError as exc:
        _fail(exc)
        return
    console.print(f"[green]Updated default analysis provider:[/green] {provider}")


def _admin_service() -> AdminDataService:
    return AdminDataService(_load_config(), default_password=AppSettings().admin_default_password)


@ads_app.command("list")
def ads_list() -> None:
    table = Table(title="Manual Ads")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("CTA")
    table.add_column("Link")
    for ad in _admin_service().list_ads():
        table.add_row(ad.id, ad.title, ad.cta_text, ad.link)
    console.print(table)


@ads_app.command("add")
def ads_add(
    title: str = typer.Option(...),
    description: str = typer.Option(""),
    cta_text: str = typer.Option("Learn more"),
    link: str = typer.Option(""),
) -> None:
    ad = _admin_service().add_ad(
        ManualAdCreateRequest(title=title, description=description, cta_text=cta_text, link=link)
    )
    console.print(f"[green]Added:[/green] {ad.id} {ad.title}")


@ads_app.command("remove")
def ads_remove(ad_id: str = typer.Option(...)) -> None:
    if _admin_service().delete_ad(ad_id):
        console.print(f"[green]Removed:[/green] {ad_id}")
    else:
        console.print(f"[yellow]Not found:[/yellow] {ad_id}")


@suggestions_app.command("list")
def suggestions_list(
    email: Optional[str] = typer.Option(None, help="Show the prioritized tips this user would see."),
) -> None:
    service = _admin_service()
    if email:
        interests = TrackingService(service.config).searched_symbols(email)
        items = service.prioritized_suggestions(email=email, interests=interests)
    else:
        items = service.list_suggestions()
    table = Table(title="Pro Tips")
    table.add_column("ID")
    table.add_column("Symbol")
    table.add_column("Action")
    table.add_column("Target")
    table.add_column("Stop loss")
    table.add_column("For")
    for item in items:
        table.add_row(
            item.id,
            item.symbol,
            item.action,
            f"{item.target:,.2f}",
            f"{item.stop_loss:,.2f}",
            item.target_user_email or "everyone",
        )
    console.print(table)


@suggestions_app.command("add")
def suggestions_add(
    symbol: str = typer.Option(...),
    action: str = typer.Option(..., help="BUY/SELL/HOLD"),
    target: float = typer.Option(0.0),
    stop_loss: float = typer.Option(0.0),
    reason: str = typer.Option(""),
    target_user_email: Optional[str] = typer.Option(None),
) -> None:
    item = _admin_service().add_suggestion(
        ManualSuggestionCreateRequest(
            symbol=symbol,
            action=action.upper(),
            target=target,
            stop_loss=stop_loss,
            reason=reason,
            target_user_email=target_user_email,
        )
    )
    console.print(f"[green]Added:[/green] {item.id} {item.action} {item.symbol}")


@suggestions_app.command("remove")
def suggestions_remove(suggestion_id: str = typer.Option(...)) -> None:
    if _admin_service().delete_suggestion(suggestion_id):
        console.print(f"[green]Removed:[/green] {suggestion_id}")
    else:
        console.print(f"[yellow]Not found:[/yellow] {suggestion_id}")


@logs_app.command("list")
def logs_list(limit: int = typer.Option(20)) -> None:
    table = Table(title="Activity")
    table.add_column("Time")
    table.add_column("Email")
    table.add_column("Action")
    table.add_column("Details")
    table.add_column("City")
    for log in TrackingService(_load_config()).get_logs(limit=limit):
        table.add_row(
            log.timestamp.isoformat(timespec="seconds"),
            log.email,
            log.action,
            log.details,
            log.location.city if log.location and log.location.city else "",
        )
    console.print(table)


@logs_app.command("stats")
def logs_stats() -> None:
    stats = TrackingService(_load_config()).get_dashboard_stats()
    console.print(f"[green]Active users (24h):[/green] {stats.active_users}")
    console.print(f"[green]Total searches:[/green] {stats.total_searches}")
    for entry in stats.top_stocks:
        console.print(f"- {entry.name}: {entry.count}")


@admin_app.command("set-password")
def admin_set_password(
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    try:
        _admin_service().set_admin_password(password)
    except StockSenseError as exc:
        _fail(exc)
        return
    console.print("[green]Admin password updated[/green]")


if __name__ == "__main__":
    app()
