# bhreads/commands.py
"""`flask` CLI 명령어: 마이그레이션과 관리자 계정 관리"""
import click
from flask import current_app
from flask.cli import with_appcontext

from bhreads.core.exceptions import NotFoundError
from bhreads.migrations import run_migrations


@click.command('migrate')
@with_appcontext
def migrate_command():
    """적용되지 않은 데이터 마이그레이션을 실행합니다."""
    executed = run_migrations(current_app.services['db'])
    click.echo(f"적용된 마이그레이션: {executed or '없음'}")


@click.command('create-admin')
@with_appcontext
def create_admin_command():
    """ADMIN_* 환경 변수로 관리자 계정을 만들거나 기존 계정을 승격합니다."""
    settings = current_app.services['settings']
    if not settings.admin_email or not settings.admin_password:
        raise click.ClickException("ADMIN_EMAIL 과 ADMIN_PASSWORD 가 필요합니다.")
    user, created = current_app.services['auth'].ensure_admin(
        settings.admin_username, settings.admin_email, settings.admin_password
    )
    click.echo(f"{'관리자 생성' if created else '관리자 확인'}: {user['email']}")


@click.command('promote-admin')
@click.argument('email')
@with_appcontext
def promote_admin_command(email):
    """기존 사용자를 admin 역할로 승격합니다."""
    try:
        user = current_app.services['auth'].promote_to_admin(email)
    except NotFoundError as e:
        raise click.ClickException(e.message)
    click.echo(f"{user['username']} 님이 이제 관리자입니다.")


def register_commands(app):
    app.cli.add_command(migrate_command)
    app.cli.add_command(create_admin_command)
    app.cli.add_command(promote_admin_command)
