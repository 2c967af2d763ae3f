"""
FHIR 인증 게이트웨이

메인 진입점 파일입니다.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from config.adapters import DEFAULT_ENV_FILE, initialize_config
from core.domain.entities import ResolvedConfig, TlsCertKeyPair
from core.domain.errors import ConfigResolutionError

# 메인 CLI 앱
app = typer.Typer(
    name="fhir-auth-gateway",
    help="FHIR 인증 게이트웨이",
    no_args_is_help=True,
)

console = Console()


def _resolve(env_file: str) -> ResolvedConfig:
    """설정을 해석하고, 실패하면 오류를 출력한 뒤 종료합니다."""
    try:
        return asyncio.run(initialize_config(env_file=env_file))
    except ConfigResolutionError as e:
        console.print(f"[red]설정 오류: {str(e)}[/red]")
        raise typer.Exit(1)


def _mask(value) -> str:
    return "******" if value else "-"


def build_config_table(config: ResolvedConfig) -> Table:
    """해석된 설정을 표로 만듭니다. 비밀 값은 가립니다."""
    table = Table(title="현재 설정")
    table.add_column("항목", style="cyan")
    table.add_column("값", style="green")

    table.add_row("운영 환경", str(config.is_production))
    table.add_row("호스트", config.network.host)
    table.add_row("포트", str(config.network.port))
    table.add_row("리다이렉트 URL", config.redirect_url or "-")
    table.add_row("로그 레벨", config.logging.level.value)

    rotation = config.logging.rotation
    if rotation is not None:
        table.add_row("로그 파일", rotation.filename)
        table.add_row("로테이션 주기", f"{rotation.frequency.value} ({rotation.date_format})")
        table.add_row("최대 로그 수", rotation.max_logs or "-")
        table.add_row("최대 크기", rotation.max_size or "-")

    table.add_row("CORS 오리진", str(config.cors.origin))
    table.add_row("CORS 메서드", config.cors.methods or "-")
    table.add_row("JWKS 엔드포인트", config.jwt.jwks_endpoint or "-")
    algorithms = config.jwt.allowed_algorithms
    table.add_row("JWT 알고리즘", ", ".join(algorithms) if algorithms else "-")
    table.add_row("JWT Audience", config.jwt.allowed_audiences or "-")
    table.add_row("JWT Issuer", config.jwt.allowed_issuers or "-")
    table.add_row("Bearer 토큰", f"{len(config.auth_keys)}개")

    if config.tls is None:
        table.add_row("TLS", "사용 안 함")
    elif isinstance(config.tls, TlsCertKeyPair):
        table.add_row("TLS", "인증서/키")
    else:
        table.add_row("TLS", "PFX")
        table.add_row("PFX 암호", _mask(config.tls.passphrase))

    return table


@app.command("serve")
def serve(
    env_file: str = typer.Option(DEFAULT_ENV_FILE, "--env-file", help=".env 파일 경로"),
):
    """설정을 해석하고 웹 서버를 실행합니다."""
    from web_server import run_server

    config = _resolve(env_file)
    try:
        run_server(config)
    except (ConfigResolutionError, ValueError) as e:
        console.print(f"[red]서버 시작 오류: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command("config")
def show_config(
    env_file: str = typer.Option(DEFAULT_ENV_FILE, "--env-file", help=".env 파일 경로"),
):
    """현재 설정을 표시합니다."""
    config = _resolve(env_file)
    console.print(build_config_table(config))


@app.command("version")
def show_version():
    """버전 정보를 표시합니다."""
    from web_server import VERSION

    console.print("[bold]FHIR 인증 게이트웨이[/bold]")
    console.print(f"버전: {VERSION}")


if __name__ == "__main__":
    app()
