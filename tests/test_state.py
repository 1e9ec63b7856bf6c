import re
from datetime import datetime

from stackup.ids import checkout_dir_name, new_deployment_id, repo_name_from_reference
from stackup.state import discard_checkout, get_checkout_path


def test_deployment_id_carries_start_time():
    deployment_id = new_deployment_id(datetime(2025, 3, 14, 9, 26, 53))
    assert re.fullmatch(r"20250314-092653-[0-9a-f]{4}", deployment_id)


def test_same_second_ids_differ():
    now = datetime(2025, 3, 14, 9, 26, 53)
    assert len({new_deployment_id(now) for _ in range(20)}) > 1


def test_repo_name_from_reference():
    assert repo_name_from_reference("https://github.com/acme/shop.git") == "shop"
    assert repo_name_from_reference("https://github.com/acme/shop/") == "shop"
    assert repo_name_from_reference("/srv/repos/my app") == "my-app"
    assert repo_name_from_reference("https://github.com/acme/...") == "repo"


def test_checkout_path_is_per_deployment(tmp_path):
    home = tmp_path / "home"
    a = get_checkout_path(home, "https://github.com/acme/shop", "20250314-092653-ab12")
    b = get_checkout_path(home, "https://github.com/acme/shop", "20250314-092653-cd34")

    assert home.is_dir()
    assert a.name == checkout_dir_name("https://github.com/acme/shop", "20250314-092653-ab12")
    assert a.name == "shop-20250314-092653-ab12"
    assert a != b
    assert not a.exists()


def test_discard_checkout(tmp_path):
    checkout = tmp_path / "shop-20250314-092653-ab12"
    (checkout / "backend").mkdir(parents=True)
    (checkout / "docker-compose.yml").write_text("services: {}\n")

    assert discard_checkout(checkout) is True
    assert not checkout.exists()
    # already gone
    assert discard_checkout(checkout) is True
