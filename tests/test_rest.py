import io


def upload(client, headers, content=b'hello', name='notes.txt', mimetype='text/plain', folder=None):
    data = {'file': (io.BytesIO(content), name, mimetype)}
    if folder:
        data['folder'] = folder
    return client.post('/api/upload', data=data, headers=headers,
                       content_type='multipart/form-data')


def test_login_verify_and_refresh(client, admin):
    resp = client.post('/api/auth/login', json={'email': 'Admin@Example.com', 'password': 'admin123'})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['user']['role'] == 'ADMIN'

    resp = client.get('/api/auth/verify', headers={'Authorization': 'Bearer %s' % body['token']})
    assert resp.get_json()['email'] == 'admin@example.com'

    resp = client.post('/api/auth/refresh', json={'refreshToken': body['refreshToken']})
    assert resp.status_code == 200
    assert resp.get_json()['user']['id'] == admin.id


def test_login_failures(client, admin):
    assert client.post('/api/auth/login', json={'email': 'admin@example.com'}).status_code == 400
    resp = client.post('/api/auth/login', json={'email': 'admin@example.com', 'password': 'nope'})
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'Invalid email or password'}
    assert client.get('/api/auth/verify').status_code == 401


def test_post_crud(client, admin, auth_header):
    headers = auth_header(admin)
    resp = client.post('/api/posts', headers=headers, json={
        'title': 'Hello', 'slug': 'hello', 'content': 'Body', 'published': True,
    })
    assert resp.status_code == 201
    post_id = resp.get_json()['id']
    assert resp.get_json()['publishedAt'] is not None

    resp = client.put('/api/posts/%s' % post_id, headers=headers, json={'title': 'Hello again'})
    assert resp.get_json()['title'] == 'Hello again'

    assert client.get('/api/posts/ignored?slug=hello').get_json()['id'] == post_id

    assert client.delete('/api/posts/%s' % post_id, headers=headers).get_json() == {'success': True}
    assert client.get('/api/posts/%s' % post_id).status_code == 404


def test_post_writes_need_admin(client, user, auth_header):
    body = {'title': 'Hello', 'slug': 'hello', 'content': 'Body'}
    assert client.post('/api/posts', json=body).status_code == 401
    assert client.post('/api/posts', json=body, headers=auth_header(user)).status_code == 403


def test_post_listing_hides_drafts_from_public(client, repo, admin, auth_header):
    repo.create_post(admin.id, {'title': 'Live', 'slug': 'live', 'content': 'x', 'published': True})
    draft = repo.create_post(admin.id, {'title': 'Draft', 'slug': 'draft', 'content': 'x'})

    body = client.get('/api/posts').get_json()
    assert [post['slug'] for post in body['posts']] == ['live']
    assert body['total'] == 1
    assert client.get('/api/posts/%s' % draft.id).status_code == 404
    assert client.get('/api/posts?published=false').status_code == 401

    body = client.get('/api/posts?published=false', headers=auth_header(admin)).get_json()
    assert [post['slug'] for post in body['posts']] == ['draft']


def test_post_listing_query_parameters(client, repo, admin):
    tag = repo.create_tag({'name': 'Flask', 'slug': 'flask'})
    for slug in ('a', 'b', 'c'):
        repo.create_post(admin.id, {'title': slug.upper(), 'slug': slug, 'content': 'x',
                                    'published': True, 'tag_ids': [tag.id] if slug != 'b' else []})
    body = client.get('/api/posts?orderBy=title:asc&take=1&skip=1').get_json()
    assert [post['slug'] for post in body['posts']] == ['b']
    assert (body['total'], body['skip'], body['take']) == (3, 1, 1)

    body = client.get('/api/posts?tagIds=%s&orderBy=title:desc' % tag.id).get_json()
    assert [post['slug'] for post in body['posts']] == ['c', 'a']
    assert client.get('/api/posts?take=abc').status_code == 400


def test_category_endpoints(client, repo, admin, auth_header):
    headers = auth_header(admin)
    resp = client.post('/api/categories', headers=headers,
                       json={'name': 'Backend', 'slug': 'backend', 'description': 'Servers'})
    assert resp.status_code == 201
    category_id = resp.get_json()['id']
    repo.create_post(admin.id, {'title': 'Live', 'slug': 'live', 'content': 'x',
                                'published': True, 'category_id': category_id})
    repo.create_post(admin.id, {'title': 'Draft', 'slug': 'draft', 'content': 'x',
                                'category_id': category_id})

    listed = client.get('/api/categories').get_json()
    assert listed[0]['_count'] == {'posts': 2}

    detail = client.get('/api/categories/%s' % category_id).get_json()
    assert [post['slug'] for post in detail['posts']] == ['live']

    resp = client.delete('/api/categories/%s' % category_id, headers=headers)
    assert resp.status_code == 400
    assert 'still used' in resp.get_json()['error']


def test_tag_endpoints(client, admin, auth_header):
    headers = auth_header(admin)
    tag_id = client.post('/api/tags', headers=headers, json={'name': 'Py', 'slug': 'py'}).get_json()['id']
    resp = client.put('/api/tags/%s' % tag_id, headers=headers, json={'name': 'Python'})
    assert resp.get_json()['name'] == 'Python'
    assert client.delete('/api/tags/%s' % tag_id, headers=headers).status_code == 200
    assert client.get('/api/tags/%s' % tag_id).status_code == 404


def test_disallowed_type_is_rejected_before_storage(client, admin, auth_header, storage):
    resp = upload(client, auth_header(admin), content=b'MZ', name='setup.exe',
                  mimetype='application/x-msdownload')
    assert resp.status_code == 400
    assert 'Unsupported file type' in resp.get_json()['error']
    assert storage.puts == []


def test_oversized_upload_is_rejected(app, client, admin, auth_header, storage):
    app.config['MAX_UPLOAD_SIZE'] = 4
    resp = upload(client, auth_header(admin), content=b'too large')
    assert resp.status_code == 400
    assert storage.puts == []


def test_upload_requires_admin(client, user, auth_header, storage):
    assert upload(client, {}).status_code == 401
    assert upload(client, auth_header(user)).status_code == 403
    assert storage.puts == []


def test_upload_and_list_files(client, admin, auth_header, storage):
    headers = auth_header(admin)
    resp = upload(client, headers, folder='docs')
    assert resp.status_code == 201
    stored = resp.get_json()['file']
    assert stored['originalName'] == 'notes.txt'
    assert stored['folder'] == 'docs'
    assert stored['url'] in storage.blobs

    upload(client, headers, content=b'\x89PNG', name='pic.png', mimetype='image/png')
    body = client.get('/api/files?type=image/', headers=headers).get_json()
    assert [f['originalName'] for f in body['files']] == ['pic.png']
    assert body['pagination'] == {'page': 1, 'limit': 20, 'total': 1, 'pages': 1}

    assert client.get('/api/files/%s' % stored['id'], headers=headers).get_json()['size'] == 5


def test_batch_delete_is_best_effort(client, repo, admin, auth_header, storage):
    headers = auth_header(admin)
    first = upload(client, headers).get_json()['file']
    second = upload(client, headers, name='other.txt').get_json()['file']
    storage.fail_deletes.add(first['url'])

    resp = client.delete('/api/files', headers=headers, json={'fileIds': [first['id'], second['id']]})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body['deletedCount'] == 2
    assert body['failed'] == [first['id']]
    assert storage.deleted == [second['url']]
    assert repo.count_uploads() == 0


def test_batch_delete_validation(client, admin, auth_header):
    headers = auth_header(admin)
    assert client.delete('/api/files', headers=headers, json={'fileIds': []}).status_code == 400
    assert client.delete('/api/files', headers=headers, json={'fileIds': ['nope']}).status_code == 404


def test_delete_upload_by_query_id(client, repo, admin, auth_header, storage):
    headers = auth_header(admin)
    stored = upload(client, headers).get_json()['file']
    assert client.delete('/api/upload', headers=headers).status_code == 400
    resp = client.delete('/api/upload?id=%s' % stored['id'], headers=headers)
    assert resp.get_json() == {'success': True}
    assert repo.get_upload(stored['id']) is None


def test_local_backend_serves_uploaded_files(client, admin, auth_header):
    resp = upload(client, auth_header(admin), content=b'served bytes', folder='docs')
    url = resp.get_json()['file']['url']
    assert url.startswith('/api/uploads/docs/')
    served = client.get(url)
    assert served.status_code == 200
    assert served.data == b'served bytes'
    served.close()


def test_stats_is_admin_only(client, repo, admin, user, auth_header):
    repo.create_post(admin.id, {'title': 'Live', 'slug': 'live', 'content': 'x', 'published': True})
    assert client.get('/api/stats', headers=auth_header(user)).status_code == 403
    body = client.get('/api/stats', headers=auth_header(admin)).get_json()
    assert body['publishedPosts'] == 1
    assert body['draftPosts'] == 0


def test_string_flags_are_rejected(client, repo, admin, auth_header):
    resp = client.post('/api/posts', headers=auth_header(admin), json={
        'title': 'Hello', 'slug': 'hello', 'content': 'Body', 'published': 'false',
    })
    assert resp.status_code == 400
    assert 'published must be true or false' in resp.get_json()['error']
    assert repo.get_post(slug='hello') is None
