def test_socket_connect_reports_phase(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    received = sio_client.get_received('/ws')
    connected = [pkt for pkt in received if pkt['name'] == 'connected']
    assert connected
    assert connected[0]['args'][0]['phase'] == 1


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_phase_change_is_broadcast(sio_client, admin_client):
    sio_client.get_received('/ws')  # flush

    admin_client.post('/api/admin/set-phase', json={'phase': 2})

    events = sio_client.get_received('/ws')
    updates = [e['args'][0] for e in events if e['name'] == 'state_update']
    assert updates == [{'phase': 2}]


def test_rejected_change_is_not_broadcast(sio_client, admin_client):
    sio_client.get_received('/ws')

    res = admin_client.post('/api/admin/set-phase', json={'phase': 1})
    assert res.status_code == 400

    events = sio_client.get_received('/ws')
    assert not any(e['name'] == 'state_update' for e in events)


def test_registration_and_reset_are_broadcast(sio_client, register, admin_client):
    sio_client.get_received('/ws')

    register('alice')
    admin_client.post('/api/admin/reset')

    events = sio_client.get_received('/ws')
    updates = [e['args'][0] for e in events if e['name'] == 'state_update']
    assert updates == [{'phase': 1}, {'phase': 1}]
