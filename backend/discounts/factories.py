from .models import Promotion
from .strategies import (
    BundlePromotionStrategy,
    FixedPromotionStrategy,
    PercentagePromotionStrategy,
    PromotionStrategy,
)


class PromotionStrategyFactory:
    """
    Factory for creating a pricing strategy based on the promotion's type.
    """

    _strategies = {
        Promotion.PromotionType.PERCENTAGE: PercentagePromotionStrategy,
        Promotion.PromotionType.FIXED: FixedPromotionStrategy,
        Promotion.PromotionType.BUNDLE: BundlePromotionStrategy,
    }

    @staticmethod
    def get_strategy(promotion: Promotion) -> PromotionStrategy:
        """
        Selects and returns the appropriate strategy instance.
        """
        strategy_class = PromotionStrategyFactory._strategies.get(promotion.type)

        if strategy_class:
            return strategy_class()

        raise NotImplementedError(f"No strategy implemented for promotion type '{promotion.type}'")
