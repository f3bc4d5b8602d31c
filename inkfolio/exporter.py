"""Write published database content into the content directory the public site reads.

Each export regenerates the tree: files for content that is no longer
published (or was deleted or renamed) are removed.
"""
import json
import logging
import os

import yaml

logger = logging.getLogger(__name__)


def _write_mdx(path, meta, body):
    front_matter = yaml.safe_dump(meta, allow_unicode=True, sort_keys=False)
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write('---\n%s---\n\n%s\n' % (front_matter, body or ''))


def _prune(directory, keep):
    removed = 0
    for name in os.listdir(directory):
        if name.endswith('.mdx') and name not in keep:
            os.remove(os.path.join(directory, name))
            removed += 1
    if removed:
        logger.info('Removed %d stale file(s) from %s', removed, directory)
    return removed


def export_posts(repo, root):
    posts_dir = os.path.join(root, 'posts')
    os.makedirs(posts_dir, exist_ok=True)
    posts = repo.list_posts({'published': True}, take=None)
    written = set()
    for post in posts:
        meta = {
            'title': post.title,
            'slug': post.slug,
            'excerpt': post.excerpt or '',
            'date': (post.published_at or post.created_at).date().isoformat(),
            'published': True,
            'category': post.category.name if post.category else '',
            'tags': [tag.name for tag in post.tags],
            'author': post.author.name or post.author.email,
        }
        filename = '%s.mdx' % post.slug
        _write_mdx(os.path.join(posts_dir, filename), meta, post.content)
        written.add(filename)
    _prune(posts_dir, written)
    return len(posts)


def export_projects(repo, root):
    projects_dir = os.path.join(root, 'projects')
    os.makedirs(projects_dir, exist_ok=True)
    projects = repo.list_projects({'published': True}, take=None)
    written = set()
    for project in projects:
        meta = {
            'title': project.title,
            'slug': project.slug,
            'description': project.description,
            'technologies': project.technology_list,
            'githubUrl': project.github_url,
            'liveUrl': project.live_url,
            'imageUrl': project.image_url,
            'featured': project.featured,
            'published': True,
            'createdAt': project.created_at.isoformat(),
        }
        meta = {key: value for key, value in meta.items() if value is not None}
        filename = '%s.mdx' % project.slug
        _write_mdx(os.path.join(projects_dir, filename), meta, project.content)
        written.add(filename)
    _prune(projects_dir, written)
    # The loader falls back to projects.json only when no MDX exists
    legacy = os.path.join(projects_dir, 'projects.json')
    if os.path.exists(legacy):
        os.remove(legacy)
    return len(projects)


def export_resume(repo, root):
    resume_path = os.path.join(root, 'resume', 'resume.json')
    resume = repo.latest_resume()
    if resume is None:
        if os.path.exists(resume_path):
            os.remove(resume_path)
        return False
    os.makedirs(os.path.dirname(resume_path), exist_ok=True)
    with open(resume_path, 'w', encoding='utf-8') as fh:
        json.dump(json.loads(resume.data), fh, ensure_ascii=False, indent=2)
    return True


def export_content(repo, root):
    summary = {
        'posts': export_posts(repo, root),
        'projects': export_projects(repo, root),
        'resume': export_resume(repo, root),
    }
    logger.info('Exported content to %s: %s', root, summary)
    return summary
