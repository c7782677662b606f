from clubhub.models import Club, UserClub


def test_create_club_command(app, make_user):
    owner_id = make_user(name='alice')
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-club', '--name', 'Chess Club', '--description', 'We play chess',
        '--owner-email', 'ALICE@example.com',
    ])

    assert result.exit_code == 0, result.output
    assert 'Successfully created club: Chess Club' in result.output
    with app.app_context():
        club = Club.query.one()
        assert club.owner_id == owner_id
        membership = UserClub.query.filter_by(club_id=club.id, user_id=owner_id).one()
        assert membership.is_admin and membership.is_member


def test_create_club_command_unknown_owner(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-club', '--name', 'Chess Club', '--description', 'We play chess',
        '--owner-email', 'ghost@example.com',
    ])

    assert result.exit_code != 0
    assert "No user with email 'ghost@example.com'" in result.output
    with app.app_context():
        assert Club.query.count() == 0


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Database tables created.' in result.output
