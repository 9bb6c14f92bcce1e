"""Shared fixtures: file-backed SQLite primary and log stores, seeded marketplace data and an API client."""

import pytest
from fastapi.testclient import TestClient

from home_market.auth.guard import AuthorizationGuard
from home_market.auth.security import create_access_token
from home_market.config import Settings
from home_market.database import create_db_engine, create_session_factory, create_tables
from home_market.enums.item import ItemStatus
from home_market.enums.offer import OfferStatus
from home_market.enums.order import OrderStatus
from home_market.enums.user import UserRole
from home_market.main import create_app
from home_market.models.item import Item
from home_market.models.offer import Offer
from home_market.models.order import Order
from home_market.models.shop import Category, Shop
from home_market.models.user import Role, User
from home_market.services.item_service import ItemService
from home_market.services.log_sink import LogSink
from home_market.services.offer_service import OfferService
from home_market.services.order_service import OrderService


class MarketFactory:
    """Inserts users, shops, items, offers and orders straight into the primary store."""

    def __init__(self, db):
        self.db = db
        self.roles = {}
        self.shops = {}
        self._counter = 0

    def _add(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def role(self, name: UserRole) -> Role:
        if name not in self.roles:
            self.roles[name] = self._add(Role(name=name, created_by="tests"))
        return self.roles[name]

    def user(self, role: UserRole, is_active: bool = True) -> User:
        self._counter += 1
        username = f"{role.value}{self._counter}"
        return self._add(User(
            username=username,
            email=f"{username}@example.com",
            full_name=username.title(),
            role_id=self.role(role).id,
            is_active=is_active,
        ))

    def shop(self, owner: User, name: str = None) -> Shop:
        shop = self._add(Shop(user_id=owner.id, name=name or f"{owner.username}'s shop"))
        self.shops[owner.id] = shop
        return shop

    def seller(self, with_shop: bool = True) -> User:
        user = self.user(UserRole.SELLER)
        if with_shop:
            self.shop(user)
        return user

    def category(self, shop: Shop, name: str = "General") -> Category:
        return self._add(Category(shop_id=shop.id, name=name))

    def item(
        self,
        shop: Shop,
        name: str = "Desk lamp",
        price: float = 25.0,
        stock: int = 5,
        status: ItemStatus = ItemStatus.ACTIVE,
        category: Category = None,
        description: str = None,
    ) -> Item:
        return self._add(Item(
            shop_id=shop.id,
            category_id=category.id if category else None,
            name=name,
            description=description,
            price=price,
            stock=stock,
            condition="used",
            status=status,
        ))

    def offer(
        self,
        giver: User,
        seller: User = None,
        status: OfferStatus = OfferStatus.PENDING,
        agreed_price: float = None,
        item_name: str = "Old bicycle",
    ) -> Offer:
        if status == OfferStatus.ACCEPTED and agreed_price is None:
            agreed_price = 40.0
        return self._add(Offer(
            giver_id=giver.id,
            seller_id=seller.id if seller else None,
            item_name=item_name,
            description="Blue, 21 gears",
            expected_price=50.0,
            agreed_price=agreed_price,
            condition="used",
            location="Bandung",
            status=status,
        ))

    def order(self, buyer: User, shop: Shop, status: OrderStatus = OrderStatus.PENDING) -> Order:
        return self._add(Order(
            buyer_id=buyer.id,
            shop_id=shop.id,
            total_price=25.0,
            status=status,
            shipping_address="Jl. Merdeka 1, Jakarta",
        ))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_url=f"sqlite:///{tmp_path / 'market.db'}",
        log_db_url=f"sqlite:///{tmp_path / 'market_log.db'}",
        secret_key="test-secret-key",
        log_to_console=False,
        log_to_file=False,
        log_sink_timeout_seconds=2.0,
        log_sink_retries=0,
    )


@pytest.fixture
def log_engine(settings):
    engine = create_db_engine(settings.log_database_url, settings)
    yield engine
    engine.dispose()


@pytest.fixture
def engine(settings, log_engine):
    engine = create_db_engine(settings.database_url, settings)
    create_tables(engine, log_engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def log_sink(engine, log_engine):
    sink = LogSink(create_session_factory(log_engine), timeout=2.0, retries=0)
    yield sink
    sink.shutdown()


@pytest.fixture
def factory(db):
    return MarketFactory(db)


@pytest.fixture
def giver(factory):
    return factory.user(UserRole.GIVER)


@pytest.fixture
def buyer(factory):
    return factory.user(UserRole.BUYER)


@pytest.fixture
def admin(factory):
    return factory.user(UserRole.ADMIN)


@pytest.fixture
def seller(factory):
    return factory.seller()


@pytest.fixture
def shop(factory, seller):
    return factory.shops[seller.id]


@pytest.fixture
def offer_service(db, log_sink):
    return OfferService(db, AuthorizationGuard(db), log_sink)


@pytest.fixture
def order_service(db, log_sink):
    return OrderService(db, AuthorizationGuard(db), log_sink)


@pytest.fixture
def item_service(db, log_sink):
    return ItemService(db, AuthorizationGuard(db), log_sink)


@pytest.fixture
def client(settings, engine):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings):
    """Build a bearer header for a seeded user."""

    def _headers(user: User) -> dict:
        token = create_access_token(user.id, user.role_name, settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers
