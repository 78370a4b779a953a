"""
Services
Business operations on top of a storage backend. One Services container is
built per application and kept in app.extensions['stallpos'].
"""

from stallpos.services.catalog import CatalogService
from stallpos.services.clearing import DataClearingService
from stallpos.services.inventory import InventorySessionService
from stallpos.services.sales import SalesService
from stallpos.services.summaries import SummaryAggregator


class Services:
    """Everything a request handler needs, wired to one storage backend"""

    def __init__(self, storage, catalog, sales, summaries, clearing, inventory):
        self.storage = storage
        self.catalog = catalog
        self.sales = sales
        self.summaries = summaries
        self.clearing = clearing
        self.inventory = inventory


def build_services(storage, clock=None, default_biller='Sriram'):
    """
    Wire the services to a storage backend

    Args:
        storage: Storage backend
        clock: Callable returning the current datetime (datetime.now by default)
        default_biller: Biller name for sales that do not give one
    """
    summaries = SummaryAggregator(storage)
    return Services(
        storage=storage,
        catalog=CatalogService(storage),
        sales=SalesService(storage, summaries, clock=clock, default_biller=default_biller),
        summaries=summaries,
        clearing=DataClearingService(storage),
        inventory=InventorySessionService(storage, clock=clock),
    )
