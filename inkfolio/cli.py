import json

import click
from flask import current_app

from inkfolio import db
from inkfolio.exporter import export_content
from inkfolio.models import ROLE_ADMIN
from inkfolio.repository import ContentRepository

SEED_CATEGORIES = [
    {'name': 'Frontend', 'slug': 'frontend', 'description': 'Frontend development'},
    {'name': 'Backend', 'slug': 'backend', 'description': 'Backend development'},
    {'name': 'Full Stack', 'slug': 'fullstack', 'description': 'Full stack development'},
]

SEED_TAGS = [
    {'name': 'Next.js', 'slug': 'nextjs'},
    {'name': 'React', 'slug': 'react'},
    {'name': 'TypeScript', 'slug': 'typescript'},
    {'name': 'GraphQL', 'slug': 'graphql'},
    {'name': 'Node.js', 'slug': 'nodejs'},
]

SEED_RESUME = {
    'personalInfo': {'name': 'Admin', 'title': 'Full Stack Developer', 'email': 'admin@example.com'},
    'summary': 'Developer writing about the web.',
}


def seed_database(repo):
    admin = repo.get_user_by_email('admin@example.com')
    if admin is None:
        admin = repo.create_user('admin@example.com', 'admin123', name='Admin', role=ROLE_ADMIN)

    categories = [repo.get_category(slug=item['slug']) or repo.create_category(item)
                  for item in SEED_CATEGORIES]
    tags = [repo.get_tag(slug=item['slug']) or repo.create_tag(item) for item in SEED_TAGS]

    if repo.get_post(slug='hello-graphql') is None:
        repo.create_post(admin.id, {
            'title': 'Hello GraphQL',
            'slug': 'hello-graphql',
            'excerpt': 'Building a content API with a single endpoint.',
            'content': '# Hello GraphQL\n\nOne endpoint, typed queries, explicit mutations.',
            'published': True,
            'category_id': categories[1].id,
            'tag_ids': [tags[3].id],
        })
    if repo.get_project(slug='inkfolio') is None:
        repo.create_project({
            'title': 'Inkfolio',
            'slug': 'inkfolio',
            'description': 'Blog, portfolio and resume site with an admin back office.',
            'technologies': ['Python', 'Flask', 'GraphQL'],
            'featured': True,
            'published': True,
        })
    if repo.latest_resume() is None:
        repo.upsert_resume(json.dumps(SEED_RESUME))
    return admin


def register_commands(app):
    @app.cli.command('seed')
    def seed():
        """Create the demo admin, categories, tags and sample content."""
        admin = seed_database(ContentRepository(db.session))
        click.echo('Seeded database (admin: %s)' % admin.email)

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.argument('password')
    @click.option('--name', default=None)
    def create_admin(email, password, name):
        """Create an admin user."""
        repo = ContentRepository(db.session)
        if repo.get_user_by_email(email):
            raise click.ClickException('User %s already exists' % email)
        repo.create_user(email, password, name=name, role=ROLE_ADMIN)
        click.echo('Admin user created')

    @app.cli.command('export-content')
    @click.option('--out', default=None, help='Target directory (defaults to CONTENT_DIR).')
    def export(out):
        """Write published posts, projects and the resume to the content directory."""
        root = out or current_app.config['CONTENT_DIR']
        summary = export_content(ContentRepository(db.session), root)
        click.echo('Exported %(posts)d posts, %(projects)d projects' % summary)
