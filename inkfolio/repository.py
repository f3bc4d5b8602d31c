import logging
import re
from contextlib import contextmanager

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from inkfolio.errors import HasDependents, NotFound, UpstreamFailure, ValidationError
from inkfolio.models import (
    ROLE_ADMIN, ROLE_USER, Category, Post, Project, Resume, Tag, Upload, User,
)
from inkfolio.schemas import build_resume_document, encode_technologies, parse_resume_document

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')

POST_ORDER_FIELDS = ('created_at', 'published_at', 'title')
PROJECT_ORDER_FIELDS = ('created_at', 'title', 'featured')
UPLOAD_ORDER_FIELDS = ('created_at', 'filename', 'size')


def _require(data, *fields):
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError('%s is required' % field)


def _check_slug(slug):
    if not SLUG_RE.match(slug or ''):
        raise ValidationError('Slug must be URL-safe: %r' % slug)


def _check_flags(data, *fields):
    for field in fields:
        value = data.get(field)
        if value is not None and not isinstance(value, bool):
            raise ValidationError('%s must be true or false' % field)


def _order_clause(model, order_by, fields, default):
    for field in fields:
        direction = (order_by or {}).get(field)
        if not direction:
            continue
        if direction not in ('asc', 'desc'):
            raise ValidationError('Invalid order direction: %r' % direction)
        column = getattr(model, field)
        return column.asc() if direction == 'asc' else column.desc()
    return default


def _assign(entity, data, fields):
    for field in fields:
        if field in data:
            setattr(entity, field, data[field])


class ContentRepository:
    """Typed CRUD over the relational store.

    Takes the session explicitly; writes go through ``unit_of_work`` so a
    multi-step change either commits whole or not at all.
    """

    def __init__(self, session):
        self.session = session

    @contextmanager
    def unit_of_work(self):
        try:
            yield self.session
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info('Rejected write: %s', exc.orig)
            raise ValidationError('Conflicting or invalid data') from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise UpstreamFailure('Database operation failed') from exc
        except Exception:
            self.session.rollback()
            raise

    def _get_or_404(self, model, entity_id, label):
        entity = self.session.get(model, entity_id) if entity_id else None
        if entity is None:
            raise NotFound('%s not found' % label)
        return entity

    def _find(self, model, id=None, slug=None):
        if id:
            return self.session.get(model, id)
        if slug:
            return self.session.query(model).filter_by(slug=slug).first()
        return None

    # --- Users ---
    def get_user(self, user_id):
        return self.session.get(User, user_id) if user_id else None

    def get_user_by_email(self, email):
        return self.session.query(User).filter_by(email=(email or '').strip().lower()).first()

    def create_user(self, email, password, name=None, role=ROLE_USER):
        if not email or not password:
            raise ValidationError('Email and password required')
        if role not in (ROLE_USER, ROLE_ADMIN):
            raise ValidationError('Unknown role: %r' % role)
        user = User(
            email=email.strip().lower(),
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
        )
        with self.unit_of_work():
            self.session.add(user)
        return user

    def authenticate(self, email, password):
        user = self.get_user_by_email(email)
        if user is None or not check_password_hash(user.password_hash, password or ''):
            return None
        return user

    # --- Posts ---
    def _post_query(self, filter):
        query = self.session.query(Post)
        filter = filter or {}
        if filter.get('published') is not None:
            query = query.filter(Post.published == filter['published'])
        if filter.get('category_id'):
            query = query.filter(Post.category_id == filter['category_id'])
        if filter.get('tag_ids'):
            query = query.filter(Post.tags.any(Tag.id.in_(filter['tag_ids'])))
        if filter.get('search'):
            term = filter['search']
            query = query.filter(or_(
                Post.title.contains(term, autoescape=True),
                Post.excerpt.contains(term, autoescape=True),
                Post.content.contains(term, autoescape=True),
            ))
        return query

    def list_posts(self, filter=None, skip=0, take=10, order_by=None):
        order = _order_clause(Post, order_by, POST_ORDER_FIELDS, Post.published_at.desc())
        return self._post_query(filter).order_by(order).offset(skip or 0).limit(take).all()

    def count_posts(self, filter=None):
        return self._post_query(filter).count()

    def get_post(self, id=None, slug=None):
        return self._find(Post, id=id, slug=slug)

    def _resolve_tags(self, tag_ids):
        tag_ids = list(dict.fromkeys(tag_ids or []))
        if not tag_ids:
            return []
        tags = self.session.query(Tag).filter(Tag.id.in_(tag_ids)).all()
        missing = set(tag_ids) - {tag.id for tag in tags}
        if missing:
            raise NotFound('Tag not found: %s' % ', '.join(sorted(missing)))
        by_id = {tag.id: tag for tag in tags}
        return [by_id[tag_id] for tag_id in tag_ids]

    def _check_category(self, category_id):
        if category_id:
            self._get_or_404(Category, category_id, 'Category')

    def create_post(self, author_id, data):
        _require(data, 'title', 'slug', 'content')
        _check_slug(data['slug'])
        _check_flags(data, 'published')
        self._check_category(data.get('category_id'))
        with self.unit_of_work():
            post = Post(
                title=data['title'],
                slug=data['slug'],
                excerpt=data.get('excerpt'),
                content=data['content'],
                author_id=author_id,
                category_id=data.get('category_id') or None,
            )
            post.set_published(data.get('published', False))
            post.tags = self._resolve_tags(data.get('tag_ids'))
            self.session.add(post)
        return post

    def update_post(self, post_id, data):
        post = self._get_or_404(Post, post_id, 'Post')
        if 'slug' in data:
            _check_slug(data['slug'])
        for field in ('title', 'slug', 'content'):
            if field in data:
                _require(data, field)
        _check_flags(data, 'published')
        if 'category_id' in data:
            self._check_category(data['category_id'])
        with self.unit_of_work():
            _assign(post, data, ('title', 'slug', 'excerpt', 'content'))
            if 'category_id' in data:
                post.category_id = data['category_id'] or None
            if data.get('published') is not None:
                post.set_published(data['published'])
            if data.get('tag_ids') is not None:
                # Full replacement: exactly the given set, in the same transaction
                post.tags = self._resolve_tags(data['tag_ids'])
        return post

    def delete_post(self, post_id):
        post = self._get_or_404(Post, post_id, 'Post')
        with self.unit_of_work():
            self.session.delete(post)
        return True

    # --- Categories ---
    def list_categories(self, newest_first=False):
        order = Category.created_at.desc() if newest_first else Category.name.asc()
        return self.session.query(Category).order_by(order).all()

    def get_category(self, id=None, slug=None):
        return self._find(Category, id=id, slug=slug)

    def count_category_posts(self, category_id, published_only=False):
        query = self.session.query(func.count(Post.id)).filter(Post.category_id == category_id)
        if published_only:
            query = query.filter(Post.published.is_(True))
        return query.scalar()

    def create_category(self, data):
        _require(data, 'name', 'slug')
        _check_slug(data['slug'])
        category = Category(name=data['name'], slug=data['slug'], description=data.get('description'))
        with self.unit_of_work():
            self.session.add(category)
        return category

    def update_category(self, category_id, data):
        category = self._get_or_404(Category, category_id, 'Category')
        if 'slug' in data:
            _check_slug(data['slug'])
        with self.unit_of_work():
            _assign(category, data, ('name', 'slug', 'description'))
        return category

    def delete_category(self, category_id):
        category = self._get_or_404(Category, category_id, 'Category')
        count = self.count_category_posts(category.id)
        if count:
            raise HasDependents('Category is still used by %d post(s)' % count)
        with self.unit_of_work():
            self.session.delete(category)
        return True

    # --- Tags ---
    def list_tags(self, newest_first=False):
        order = Tag.created_at.desc() if newest_first else Tag.name.asc()
        return self.session.query(Tag).order_by(order).all()

    def get_tag(self, id=None, slug=None):
        return self._find(Tag, id=id, slug=slug)

    def count_tag_posts(self, tag_id, published_only=False):
        query = self.session.query(func.count(Post.id)).filter(Post.tags.any(Tag.id == tag_id))
        if published_only:
            query = query.filter(Post.published.is_(True))
        return query.scalar()

    def create_tag(self, data):
        _require(data, 'name', 'slug')
        _check_slug(data['slug'])
        tag = Tag(name=data['name'], slug=data['slug'])
        with self.unit_of_work():
            self.session.add(tag)
        return tag

    def update_tag(self, tag_id, data):
        tag = self._get_or_404(Tag, tag_id, 'Tag')
        if 'slug' in data:
            _check_slug(data['slug'])
        with self.unit_of_work():
            _assign(tag, data, ('name', 'slug'))
        return tag

    def delete_tag(self, tag_id):
        tag = self._get_or_404(Tag, tag_id, 'Tag')
        count = self.count_tag_posts(tag.id)
        if count:
            raise HasDependents('Tag is still used by %d post(s)' % count)
        with self.unit_of_work():
            self.session.delete(tag)
        return True

    # --- Projects ---
    def _project_query(self, filter):
        query = self.session.query(Project)
        filter = filter or {}
        if filter.get('published') is not None:
            query = query.filter(Project.published == filter['published'])
        if filter.get('featured') is not None:
            query = query.filter(Project.featured == filter['featured'])
        if filter.get('search'):
            term = filter['search']
            query = query.filter(or_(
                Project.title.contains(term, autoescape=True),
                Project.description.contains(term, autoescape=True),
            ))
        for technology in filter.get('technologies') or []:
            # technologies is a JSON array; match the quoted element
            query = query.filter(Project.technologies.contains(
                encode_technologies([technology])[1:-1], autoescape=True))
        return query

    def list_projects(self, filter=None, skip=0, take=10, order_by=None):
        order = _order_clause(Project, order_by, PROJECT_ORDER_FIELDS, Project.created_at.desc())
        return self._project_query(filter).order_by(order).offset(skip or 0).limit(take).all()

    def count_projects(self, filter=None):
        return self._project_query(filter).count()

    def get_project(self, id=None, slug=None):
        return self._find(Project, id=id, slug=slug)

    def _project_fields(self, data):
        _check_flags(data, 'featured', 'published')
        fields = {key: data[key] for key in (
            'title', 'slug', 'description', 'content', 'github_url', 'live_url',
            'image_url') if key in data}
        # Unset flags keep their current value
        for key in ('featured', 'published'):
            if data.get(key) is not None:
                fields[key] = data[key]
        if data.get('technologies') is not None:
            try:
                fields['technologies'] = encode_technologies(data['technologies'])
            except ValueError as exc:
                raise ValidationError('technologies must be a list of strings') from exc
        return fields

    def create_project(self, data):
        _require(data, 'title', 'slug', 'description')
        _check_slug(data['slug'])
        fields = self._project_fields(data)
        fields.setdefault('technologies', '[]')
        fields['featured'] = bool(fields.get('featured'))
        fields['published'] = bool(fields.get('published'))
        project = Project(**fields)
        with self.unit_of_work():
            self.session.add(project)
        return project

    def update_project(self, project_id, data):
        project = self._get_or_404(Project, project_id, 'Project')
        for field in ('title', 'slug', 'description'):
            if field in data:
                _require(data, field)
        if 'slug' in data:
            _check_slug(data['slug'])
        fields = self._project_fields(data)
        with self.unit_of_work():
            _assign(project, fields, fields.keys())
        return project

    def delete_project(self, project_id):
        project = self._get_or_404(Project, project_id, 'Project')
        with self.unit_of_work():
            self.session.delete(project)
        return True

    # --- Resume ---
    def latest_resume(self):
        return (self.session.query(Resume)
                .order_by(Resume.created_at.desc(), Resume.id.desc())
                .first())

    def list_resumes(self, skip=0, take=10):
        return (self.session.query(Resume)
                .order_by(Resume.created_at.desc())
                .offset(skip or 0).limit(take).all())

    def create_resume(self, sections):
        try:
            document = build_resume_document(sections)
        except ValueError as exc:
            raise ValidationError('Invalid resume: %s' % exc) from exc
        resume = Resume(data=document.to_json())
        with self.unit_of_work():
            self.session.add(resume)
        return resume

    def upsert_resume(self, data):
        """Update the latest resume or create the first one."""
        try:
            document = parse_resume_document(data)
        except ValueError as exc:
            raise ValidationError('Invalid resume: %s' % exc) from exc
        resume = self.latest_resume()
        with self.unit_of_work():
            if resume is None:
                resume = Resume(data=document.to_json())
                self.session.add(resume)
            else:
                resume.data = document.to_json()
        return resume

    def delete_resume(self, resume_id):
        resume = self._get_or_404(Resume, resume_id, 'Resume')
        with self.unit_of_work():
            self.session.delete(resume)
        return True

    # --- Uploads ---
    def _upload_query(self, folder=None, mimetype_prefix=None, search=None):
        query = self.session.query(Upload)
        if folder:
            query = query.filter(Upload.folder == folder)
        if mimetype_prefix:
            query = query.filter(Upload.mimetype.startswith(mimetype_prefix))
        if search:
            query = query.filter(or_(
                Upload.filename.icontains(search, autoescape=True),
                Upload.original_name.icontains(search, autoescape=True),
            ))
        return query

    def list_uploads(self, skip=0, take=20, order_by=None, **filters):
        order = _order_clause(Upload, order_by, UPLOAD_ORDER_FIELDS, Upload.created_at.desc())
        return self._upload_query(**filters).order_by(order).offset(skip or 0).limit(take).all()

    def count_uploads(self, **filters):
        return self._upload_query(**filters).count()

    def get_upload(self, upload_id):
        return self.session.get(Upload, upload_id) if upload_id else None

    def get_uploads(self, upload_ids):
        if not upload_ids:
            return []
        return self.session.query(Upload).filter(Upload.id.in_(upload_ids)).all()

    def create_upload(self, **fields):
        upload = Upload(**fields)
        with self.unit_of_work():
            self.session.add(upload)
        return upload

    def delete_upload_records(self, uploads):
        with self.unit_of_work():
            for upload in uploads:
                self.session.delete(upload)
        return len(uploads)

    # --- Stats ---
    def stats(self):
        published = self.count_posts({'published': True})
        total_posts = self.count_posts()
        return {
            'posts': total_posts,
            'publishedPosts': published,
            'draftPosts': total_posts - published,
            'categories': self.session.query(func.count(Category.id)).scalar(),
            'tags': self.session.query(func.count(Tag.id)).scalar(),
            'projects': self.count_projects(),
            'uploads': self.count_uploads(),
            'uploadBytes': self.session.query(func.coalesce(func.sum(Upload.size), 0)).scalar(),
        }
