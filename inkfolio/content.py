"""
Filesystem-backed content for the public site.

Posts live in ``<root>/posts/*.mdx``, projects in ``<root>/projects/*.mdx``
(or ``projects.json`` when there are no MDX files) and the resume in
``<root>/resume/resume.json``. Every call reads through the filesystem; read
or parse failures are logged and turn into ``[]`` / ``None``.
"""
import json
import logging
import math
import os
import re
from datetime import date, datetime, timezone

import yaml

logger = logging.getLogger(__name__)

FRONT_MATTER_RE = re.compile(r'\A---\s*\n(.*?)\n---\s*(?:\n|\Z)', re.DOTALL)
WORDS_PER_MINUTE = 200


def parse_front_matter(text):
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    meta = yaml.safe_load(match.group(1)) or {}
    if not isinstance(meta, dict):
        raise ValueError('Front matter must be a mapping')
    return meta, text[match.end():]


def reading_time(text):
    words = len(re.findall(r'\S+', text or ''))
    return max(1, int(math.ceil(words / float(WORDS_PER_MINUTE))))


def _normalize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize(item) for key, item in value.items()}
    return value


def _read(path):
    with open(path, encoding='utf-8') as fh:
        return fh.read()


class ContentLoader:
    def __init__(self, root):
        self.root = root
        self.posts_dir = os.path.join(root, 'posts')
        self.projects_dir = os.path.join(root, 'projects')
        self.resume_path = os.path.join(root, 'resume', 'resume.json')

    # --- Posts ---
    def _load_post(self, filename):
        meta, body = parse_front_matter(_read(os.path.join(self.posts_dir, filename)))
        post = _normalize(meta)
        post.setdefault('slug', filename[:-len('.mdx')])
        post['id'] = filename[:-len('.mdx')]
        post['content'] = body
        post['published'] = bool(post.get('published', False))
        post['tags'] = post.get('tags') or []
        post['date'] = str(post.get('date') or '')
        post['readingTime'] = reading_time(body)
        return post

    def get_all_posts(self):
        try:
            names = sorted(name for name in os.listdir(self.posts_dir) if name.endswith('.mdx'))
            posts = [self._load_post(name) for name in names]
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error('Error reading posts from %s: %s', self.posts_dir, exc)
            return []
        posts = [post for post in posts if post['published']]
        posts.sort(key=lambda post: post['date'], reverse=True)
        return posts

    def get_post_by_slug(self, slug):
        for post in self.get_all_posts():
            if post['slug'] == slug:
                return post
        return None

    def get_latest_posts(self, limit=3):
        return self.get_all_posts()[:limit]

    def get_all_categories(self):
        return sorted({post['category'] for post in self.get_all_posts() if post.get('category')})

    def get_all_tags(self):
        return sorted({tag for post in self.get_all_posts() for tag in post['tags']})

    def get_posts_by_category(self, category):
        return [post for post in self.get_all_posts() if post.get('category') == category]

    def get_posts_by_tag(self, tag):
        return [post for post in self.get_all_posts() if tag in post['tags']]

    # --- Projects ---
    def _project_from_mdx(self, filename):
        meta, body = parse_front_matter(_read(os.path.join(self.projects_dir, filename)))
        meta = _normalize(meta)
        slug = meta.get('slug') or filename[:-len('.mdx')]
        return {
            'id': slug,
            'title': meta.get('title'),
            'slug': slug,
            'description': meta.get('description'),
            'content': body,
            'technologies': meta.get('technologies') or [],
            'githubUrl': meta.get('githubUrl'),
            'liveUrl': meta.get('liveUrl'),
            'imageUrl': meta.get('imageUrl'),
            'featured': bool(meta.get('featured', False)),
            'published': meta.get('published') is not False,
            'createdAt': str(meta.get('createdAt') or ''),
        }

    def _projects_from_mdx(self):
        names = sorted(name for name in os.listdir(self.projects_dir) if name.endswith('.mdx'))
        return [self._project_from_mdx(name) for name in names]

    def _projects_from_json(self):
        projects = json.loads(_read(os.path.join(self.projects_dir, 'projects.json')))
        if not isinstance(projects, list):
            raise ValueError('projects.json must hold a list')
        return projects

    def get_all_projects(self):
        try:
            projects = self._projects_from_mdx() or self._projects_from_json()
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error('Error reading projects from %s: %s', self.projects_dir, exc)
            return []
        projects = [project for project in projects if project.get('published')]
        projects.sort(key=lambda project: str(project.get('createdAt') or ''), reverse=True)
        return projects

    def get_project_by_slug(self, slug):
        path = os.path.join(self.projects_dir, '%s.mdx' % slug)
        if os.path.isfile(path):
            try:
                return self._project_from_mdx(os.path.basename(path))
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.error('Error reading project %s: %s', path, exc)
                return None
        for project in self.get_all_projects():
            if project.get('slug') == slug:
                return project
        return None

    def get_featured_projects(self):
        return [project for project in self.get_all_projects() if project.get('featured')]

    # --- Resume ---
    def get_resume(self):
        try:
            data = json.loads(_read(self.resume_path))
            updated = datetime.fromtimestamp(os.stat(self.resume_path).st_mtime, timezone.utc)
        except (OSError, ValueError) as exc:
            logger.error('Error reading resume %s: %s', self.resume_path, exc)
            return None
        return {
            'id': '1',
            'data': json.dumps(data),
            'updatedAt': updated.isoformat(),
        }


# --- Public listing helpers ---
def filter_posts(posts, search=None, category=None, tag=None):
    if category:
        posts = [post for post in posts if post.get('category') == category]
    if tag:
        posts = [post for post in posts if tag in post.get('tags', [])]
    if search:
        term = search.lower()
        posts = [post for post in posts if any(
            term in (post.get(field) or '').lower() for field in ('title', 'excerpt', 'content'))]
    return posts


def paginate(items, page=1, per_page=10):
    page = max(1, page)
    per_page = max(1, per_page)
    total = len(items)
    start = (page - 1) * per_page
    return {
        'items': items[start:start + per_page],
        'page': page,
        'perPage': per_page,
        'total': total,
        'pages': int(math.ceil(total / float(per_page))) if total else 0,
    }
