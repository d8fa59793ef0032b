"""Tests for default data seeding."""
from backend.auth_utils import password_matches
from backend.models import Player, Turf
from backend.services.seeder import DEFAULT_TURFS, seed_admin, seed_turfs


def test_seed_turfs_only_on_empty_table(app):
    assert seed_turfs() == len(DEFAULT_TURFS)
    assert seed_turfs() == 0
    names = [t.name for t in Turf.query.order_by(Turf.id).all()]
    assert names == ['Kick Off Turf', 'The Arena', 'Soccer City']
    prices = [t.price_per_hour for t in Turf.query.order_by(Turf.id).all()]
    assert prices == [1200, 1000, 800]


def test_seed_turfs_skips_when_turfs_exist(app, sample_turf):
    assert seed_turfs() == 0
    assert Turf.query.count() == 1


def test_seed_admin_once(app):
    assert seed_admin('Admin', '0000000000', 'admin123', 'Patia') is True
    assert seed_admin('Admin 2', '1111111111', 'admin123', 'Patia') is False

    admins = Player.query.filter_by(is_admin=True).all()
    assert len(admins) == 1
    assert admins[0].skill_level == 10
    assert password_matches(admins[0], 'admin123')


def test_seed_admin_skips_taken_phone(app, register):
    register(name='Regular', phone='0000000000')
    assert seed_admin('Admin', '0000000000', 'admin123', 'Patia') is False
    assert Player.query.filter_by(is_admin=True).count() == 0
