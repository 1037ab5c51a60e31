"""Category management commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit
from farmledger.domain.category import CategoryService
from farmledger.domain.entities import CategoryTreeNode, CategoryType
from farmledger.domain.errors import DomainError


def print_category_tree(nodes: list[CategoryTreeNode], indent: int = 0) -> None:
    """Recursively print category tree."""
    for node in nodes:
        prefix = "  " * indent
        click.echo(f"{prefix}{node.display_name} [{node.code}] ({node.category_type.value})")
        if node.children:
            print_category_tree(list(node.children), indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@farm_option
@click.pass_context
def list_categories(ctx, farm: str):
    """List a farm's categories in tree format."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CategoryService(ctx.obj["db"])

    tree = service.get_category_tree(farm_id)
    if not tree:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    print_category_tree(tree)


@category_group.command("create")
@farm_option
@click.argument("code")
@click.argument("display_name")
@click.option("--parent", help="Parent category code (e.g., 'inputs')")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in CategoryType if t != CategoryType.COMPUTED], case_sensitive=False),
    required=True,
    help="Category type",
)
@click.pass_context
def create_category(ctx, farm: str, code: str, display_name: str, parent: str, category_type: str):
    """Create a new category.

    Examples:
        farmledger category create -f "North Farm" input_inoculant "Inoculant" --parent inputs --type INPUT
    """
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(
            farm_id, code, display_name, category_type.upper(), parent_code=parent
        )
        parent_str = f" under '{parent}'" if parent else ""
        click.echo(f"Created category '{code}'{parent_str} (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("rename")
@farm_option
@click.argument("code")
@click.argument("display_name")
@click.option("--sort-order", type=int, help="New sort order")
@click.pass_context
def rename_category(ctx, farm: str, code: str, display_name: str, sort_order: int | None):
    """Change a category's display name (and optionally its sort order)."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CategoryService(ctx.obj["db"])

    try:
        service.update_category(farm_id, code, display_name=display_name, sort_order=sort_order)
        click.echo(f"Updated category '{code}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("deactivate")
@farm_option
@click.argument("code")
@click.pass_context
def deactivate_category(ctx, farm: str, code: str):
    """Deactivate a category that has no active subcategories."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CategoryService(ctx.obj["db"])

    try:
        service.deactivate_category(farm_id, code)
        click.echo(f"Deactivated category '{code}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
