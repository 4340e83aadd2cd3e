from cmdbservice.apptree import Business, Domain, Service, ServiceCluster


def test_business_add_attribute():
    business = Business(id=1)
    business.add_attribute("business_name", "shop")
    business.add_attribute("business_master", "alice")
    business.add_attribute("unknown", "ignored")
    assert business.name == "shop"
    assert business.leader == "alice"


def test_service_add_attribute():
    service = Service(id=2)
    service.add_attribute("service_id", "cart")
    service.add_attribute("service_master", "bob")
    service.add_attribute("service_describe", "cart service")
    assert (service.name, service.owner, service.desc) == ("cart", "bob", "cart service")


def test_cluster_add_attribute_ignores_unknown():
    cluster = ServiceCluster(id=3)
    cluster.add_attribute("cluster_name", "c1")
    cluster.add_attribute("cluster_describe", "first")
    cluster.add_attribute("service_id", "nope")
    assert cluster.to_dict() == {"id": 3, "name": "c1", "desc": "first"}


def test_add_domain_skips_duplicate_ids():
    business = Business(id=1)
    business.add_domain(Domain(id=5, name="a"))
    business.add_domain(Domain(id=5, name="b"))
    business.add_domain(Domain(id=6, name="c"))
    assert [d.name for d in business.children] == ["a", "c"]


def test_add_service_creates_then_updates():
    business = Business(id=1)
    business.add_domain(Domain(id=5))
    business.add_service(5, 7, "service_id", "cart")
    business.add_service(5, 7, "service_master", "bob")
    services = business.children[0].children
    assert len(services) == 1
    assert services[0].name == "cart"
    assert services[0].owner == "bob"


def test_add_service_without_domain_does_nothing():
    business = Business(id=1)
    business.add_domain(Domain(id=5))
    business.add_service(99, 7, "service_id", "cart")
    assert business.children[0].children == []


def test_add_cluster_creates_and_updates():
    service = Service(id=2)
    service.add_cluster(8, "cluster_name", "c1")
    service.add_cluster(8, "cluster_describe", "d1")
    service.add_cluster(9, "cluster_name", "c2")
    assert [c.to_dict() for c in service.children] == [
        {"id": 8, "name": "c1", "desc": "d1"},
        {"id": 9, "name": "c2", "desc": ""},
    ]


def test_business_to_dict_nests_children():
    business = Business(id=1, name="shop", leader="alice")
    business.add_domain(Domain(id=5, name="sales"))
    business.add_service(5, 7, "service_id", "cart")
    business.children[0].children[0].add_cluster(8, "cluster_name", "c1")
    tree = business.to_dict()
    assert tree["name"] == "shop"
    assert tree["leader"] == "alice"
    domain = tree["children"][0]
    assert domain["name"] == "sales"
    service = domain["children"][0]
    assert service["name"] == "cart"
    assert service["children"] == [{"id": 8, "name": "c1", "desc": ""}]