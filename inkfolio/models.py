import logging
import uuid
from datetime import datetime

from inkfolio import db
from inkfolio.schemas import decode_technologies

logger = logging.getLogger(__name__)

ROLE_USER = 'USER'
ROLE_ADMIN = 'ADMIN'


def new_id():
    return uuid.uuid4().hex


def isoformat(value):
    if value is None:
        return None
    # Stored datetimes are naive UTC
    return value.isoformat() + 'Z' if value.tzinfo is None else value.isoformat()


post_tags = db.Table(
    'post_tags',
    db.Column('post_id', db.String(32), db.ForeignKey('post.id'), primary_key=True),
    db.Column('tag_id', db.String(32), db.ForeignKey('tag.id'), primary_key=True),
)


class User(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100))
    role = db.Column(db.String(10), nullable=False, default=ROLE_USER)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    posts = db.relationship('Post', backref='author', lazy=True)
    uploads = db.relationship('Upload', backref='uploaded_by', lazy=True)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class Category(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    posts = db.relationship('Post', backref='category', lazy=True)

    def to_dict(self, post_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if post_count is not None:
            data['_count'] = {'posts': post_count}
        return data


class Tag(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self, post_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if post_count is not None:
            data['_count'] = {'posts': post_count}
        return data


class Post(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    excerpt = db.Column(db.Text)
    content = db.Column(db.Text, nullable=False)
    published = db.Column(db.Boolean, nullable=False, default=False)
    # Set on the first publish and never cleared afterwards
    published_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    author_id = db.Column(db.String(32), db.ForeignKey('user.id'), nullable=False)
    category_id = db.Column(db.String(32), db.ForeignKey('category.id'))
    tags = db.relationship('Tag', secondary=post_tags, lazy=True,
                           backref=db.backref('posts', lazy=True))

    def set_published(self, published):
        self.published = bool(published)
        if self.published and self.published_at is None:
            self.published_at = datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'excerpt': self.excerpt,
            'content': self.content,
            'published': self.published,
            'publishedAt': isoformat(self.published_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
            'author': self.author.to_dict() if self.author else None,
            'category': self.category.to_dict() if self.category else None,
            'tags': [tag.to_dict() for tag in self.tags],
        }


class Project(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text)
    technologies = db.Column(db.Text, nullable=False, default='[]')  # JSON string
    github_url = db.Column(db.String(500))
    live_url = db.Column(db.String(500))
    image_url = db.Column(db.String(500))
    featured = db.Column(db.Boolean, nullable=False, default=False)
    published = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def technology_list(self):
        try:
            return decode_technologies(self.technologies)
        except ValueError:
            logger.warning('Project %s has malformed technologies: %r', self.id, self.technologies)
            return []

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'description': self.description,
            'content': self.content,
            'technologies': self.technology_list,
            'githubUrl': self.github_url,
            'liveUrl': self.live_url,
            'imageUrl': self.image_url,
            'featured': self.featured,
            'published': self.published,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class Resume(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    data = db.Column(db.Text, nullable=False)  # JSON document, see schemas.ResumeDocument
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'data': self.data,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class Upload(db.Model):
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mimetype = db.Column(db.String(100), nullable=False)
    encoding = db.Column(db.String(20), nullable=False, default='binary')
    size = db.Column(db.Integer, nullable=False)
    folder = db.Column(db.String(100), nullable=False, default='general')
    pathname = db.Column(db.String(400), nullable=False)
    url = db.Column(db.String(1000), nullable=False)
    uploaded_by_id = db.Column(db.String(32), db.ForeignKey('user.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        uploader = self.uploaded_by
        return {
            'id': self.id,
            'filename': self.filename,
            'originalName': self.original_name,
            'mimetype': self.mimetype,
            'encoding': self.encoding,
            'size': self.size,
            'folder': self.folder,
            'url': self.url,
            'uploadedBy': {
                'id': uploader.id,
                'name': uploader.name,
                'email': uploader.email,
            } if uploader else None,
            'createdAt': isoformat(self.created_at),
        }
