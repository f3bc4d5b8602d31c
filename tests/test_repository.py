import json

import pytest

from inkfolio.errors import HasDependents, NotFound, ValidationError
from inkfolio.models import Project


def make_post(repo, author, slug, **extra):
    data = {'title': slug.title(), 'slug': slug, 'content': 'Body of %s' % slug}
    data.update(extra)
    return repo.create_post(author.id, data)


def test_published_at_is_set_once(repo, admin):
    post = make_post(repo, admin, 'first')
    assert post.published_at is None

    repo.update_post(post.id, {'published': True})
    first_published = post.published_at
    assert first_published is not None

    repo.update_post(post.id, {'published': False})
    assert post.published_at == first_published
    repo.update_post(post.id, {'published': True})
    assert post.published_at == first_published


def test_tag_ids_replace_the_whole_set(repo, admin):
    a = repo.create_tag({'name': 'A', 'slug': 'a'})
    b = repo.create_tag({'name': 'B', 'slug': 'b'})
    post = make_post(repo, admin, 'tagged', tag_ids=[a.id])

    repo.update_post(post.id, {'tag_ids': [b.id]})
    assert [tag.id for tag in post.tags] == [b.id]

    repo.update_post(post.id, {'tag_ids': []})
    assert post.tags == []

    repo.update_post(post.id, {'tag_ids': [a.id, b.id]})
    repo.update_post(post.id, {'title': 'Untouched tags'})
    assert {tag.id for tag in post.tags} == {a.id, b.id}


def test_unknown_tag_leaves_post_unchanged(repo, admin):
    a = repo.create_tag({'name': 'A', 'slug': 'a'})
    post = make_post(repo, admin, 'stable', tag_ids=[a.id])
    with pytest.raises(NotFound):
        repo.update_post(post.id, {'tag_ids': ['nope']})
    assert [tag.id for tag in repo.get_post(id=post.id).tags] == [a.id]


def test_delete_category_with_posts_is_refused(repo, admin):
    category = repo.create_category({'name': 'Backend', 'slug': 'backend'})
    make_post(repo, admin, 'in-category', category_id=category.id)
    with pytest.raises(HasDependents):
        repo.delete_category(category.id)
    assert repo.get_category(id=category.id) is not None


def test_delete_tag_with_posts_is_refused(repo, admin):
    tag = repo.create_tag({'name': 'Python', 'slug': 'python'})
    post = make_post(repo, admin, 'tagged-post', tag_ids=[tag.id])
    with pytest.raises(HasDependents):
        repo.delete_tag(tag.id)
    repo.delete_post(post.id)
    assert repo.delete_tag(tag.id) is True


def test_slug_must_be_url_safe_and_unique(repo, admin):
    with pytest.raises(ValidationError):
        make_post(repo, admin, 'not a slug')
    make_post(repo, admin, 'taken')
    with pytest.raises(ValidationError):
        make_post(repo, admin, 'taken')


def test_list_posts_filters_and_orders(repo, admin):
    tag = repo.create_tag({'name': 'GraphQL', 'slug': 'graphql'})
    make_post(repo, admin, 'alpha', published=True, tag_ids=[tag.id])
    make_post(repo, admin, 'beta', published=True)
    make_post(repo, admin, 'draft')

    published = repo.list_posts({'published': True}, order_by={'title': 'asc'})
    assert [post.slug for post in published] == ['alpha', 'beta']
    assert repo.count_posts({'published': False}) == 1
    assert [post.slug for post in repo.list_posts({'tag_ids': [tag.id]})] == ['alpha']
    assert [post.slug for post in repo.list_posts({'search': 'Body of beta'})] == ['beta']

    with pytest.raises(ValidationError):
        repo.list_posts(order_by={'title': 'sideways'})


def test_technologies_are_validated_on_write(repo):
    project = repo.create_project({
        'title': 'Site', 'slug': 'site', 'description': 'A site',
        'technologies': ['Python', 'Flask'],
    })
    assert project.technology_list == ['Python', 'Flask']
    assert repo.list_projects({'technologies': ['Flask']}) == [project]

    with pytest.raises(ValidationError):
        repo.update_project(project.id, {'technologies': 'Python'})


def test_malformed_technologies_read_as_empty(repo):
    project = Project(title='Old', slug='old', description='legacy row', technologies='not json')
    assert project.technology_list == []


def test_upsert_resume_updates_latest(repo):
    first = repo.upsert_resume(json.dumps({'personalInfo': {'name': 'Ada'}}))
    second = repo.upsert_resume(json.dumps({'personalInfo': {'name': 'Ada L.'}, 'summary': 'Hi'}))
    assert first.id == second.id
    assert json.loads(repo.latest_resume().data)['personalInfo']['name'] == 'Ada L.'

    with pytest.raises(ValidationError):
        repo.upsert_resume(json.dumps({'summary': 'no personal info'}))


def test_create_resume_from_sections(repo):
    resume = repo.create_resume({
        'personal_info': json.dumps({'name': 'Ada'}),
        'summary': 'Writes code',
        'experience': json.dumps([{'company': 'Acme', 'position': 'Engineer'}]),
        'education': '[]',
        'skills': json.dumps({'languages': ['Python']}),
        'projects': '[]',
    })
    data = json.loads(resume.data)
    assert data['schemaVersion'] == 1
    assert data['summary'] == 'Writes code'
    assert data['experience'][0]['company'] == 'Acme'


def test_stats_totals(repo, admin):
    make_post(repo, admin, 'live', published=True)
    make_post(repo, admin, 'draft')
    stats = repo.stats()
    assert stats['posts'] == 2
    assert stats['publishedPosts'] == 1
    assert stats['draftPosts'] == 1
    assert stats['uploadBytes'] == 0


def test_search_treats_like_wildcards_literally(repo, admin):
    make_post(repo, admin, 'plain', published=True)
    make_post(repo, admin, 'pct', published=True, content='Up 50% this year')
    make_post(repo, admin, 'snake', published=True, content='use snake_case names')

    assert [post.slug for post in repo.list_posts({'search': '_'})] == ['snake']
    assert [post.slug for post in repo.list_posts({'search': '%'})] == ['pct']
    assert repo.list_posts({'search': 'snakeXcase'}) == []

    repo.create_project({'title': '100% Python', 'slug': 'py', 'description': 'd',
                         'technologies': ['C_lang']})
    repo.create_project({'title': 'Other', 'slug': 'other', 'description': 'd',
                         'technologies': ['CXlang']})
    assert [p.slug for p in repo.list_projects({'search': '%'})] == ['py']
    assert [p.slug for p in repo.list_projects({'technologies': ['C_lang']})] == ['py']


def test_upload_search_treats_like_wildcards_literally(repo, admin):
    for name in ('report_2024.pdf', 'reportX2024.pdf'):
        repo.create_upload(filename=name, original_name=name, mimetype='application/pdf',
                           size=1, folder='docs', pathname='docs/' + name,
                           url='/api/uploads/docs/' + name, uploaded_by_id=admin.id)
    assert [u.filename for u in repo.list_uploads(search='t_2')] == ['report_2024.pdf']
    assert repo.count_uploads(search='%') == 0


def test_update_project_rejects_missing_required_fields(repo):
    project = repo.create_project({'title': 'Site', 'slug': 'site', 'description': 'A site'})
    for field in ('title', 'slug', 'description'):
        with pytest.raises(ValidationError, match='%s is required' % field):
            repo.update_project(project.id, {field: None})
    assert repo.get_project(id=project.id).title == 'Site'


def test_constraint_errors_do_not_leak_database_detail(repo, admin):
    make_post(repo, admin, 'taken')
    with pytest.raises(ValidationError) as excinfo:
        make_post(repo, admin, 'taken')
    assert excinfo.value.message == 'Conflicting or invalid data'


def test_flags_must_be_booleans(repo, admin):
    with pytest.raises(ValidationError):
        make_post(repo, admin, 'stringly', published='false')
    post = make_post(repo, admin, 'real')
    with pytest.raises(ValidationError):
        repo.update_post(post.id, {'published': 'false'})
    assert post.published is False

    with pytest.raises(ValidationError):
        repo.create_project({'title': 'P', 'slug': 'p', 'description': 'd', 'featured': 'no'})
    project = repo.create_project({'title': 'P', 'slug': 'p', 'description': 'd', 'featured': True})
    repo.update_project(project.id, {'featured': None, 'title': 'Q'})
    assert project.featured is True
