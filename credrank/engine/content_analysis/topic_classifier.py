"""
Keyword-based topic tagging over a fixed ten-topic taxonomy.

A text may match any number of topics. Short keywords (3 characters or fewer)
must match on word boundaries so "ai" doesn't fire inside "said"; longer
keywords match as case-insensitive substrings.
"""

import math
import re
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Pattern, Tuple

from credrank.engine.models import ContentRecord, TopicScore

PROFILE_TOPICS = (
    'ai',
    'defi',
    'nfts',
    'news',
    'macro',
    'airdrops',
    'memes',
    'trading',
    'gaming',
    'crypto',
)

TOPIC_KEYWORDS = MappingProxyType({
    'ai': (
        'ai', 'artificial intelligence', 'machine learning', 'ml', 'gpt',
        'llm', 'neural', 'deep learning', 'chatgpt', 'openai', 'anthropic',
        'claude', 'gemini', 'copilot', 'ai agent', 'autonomous agent',
        'generative ai', 'diffusion', 'stable diffusion', 'midjourney',
    ),
    'defi': (
        'defi', 'decentralized finance', 'lending', 'borrowing', 'liquidity',
        'yield', 'farming', 'staking', 'lp', 'liquidity pool', 'amm',
        'swap', 'dex', 'uniswap', 'sushiswap', 'curve', 'aave', 'compound',
        'maker', 'dai', 'vault', 'protocol', 'tvl', 'apr', 'apy',
        'impermanent loss', 'flash loan', 'leverage', 'collateral',
    ),
    'nfts': (
        'nft', 'nfts', 'erc721', 'erc-721', '721', 'mint', 'minting',
        'pfp', 'jpeg', 'jpegs', 'floor', 'floor price', 'opensea',
        'blur', 'rarible', 'foundation', 'art blocks', 'generative art',
        'digital art', 'collectible', 'ordinals', 'inscriptions', 'brc20',
        'punks', 'bayc', 'azuki', 'doodles', 'pudgy',
    ),
    'news': (
        'breaking', 'just in', 'announcement', 'announced', 'launches',
        'launched', 'partnership', 'partners', 'collaboration', 'integrates',
        'integration', 'update', 'release', 'released', 'introducing',
        'unveils', 'revealed', 'confirms', 'confirmed', 'report',
        'according to', 'sources say', 'exclusive', 'developing',
    ),
    'macro': (
        'macro', 'fed', 'federal reserve', 'interest rate', 'inflation',
        'cpi', 'gdp', 'recession', 'economy', 'economic', 'fiscal',
        'monetary', 'treasury', 'bonds', 'yields', 'dollar', 'dxy',
        'forex', 'geopolitical', 'regulation', 'sec', 'congress',
        'policy', 'etf', 'institutional', 'blackrock', 'grayscale',
    ),
    'airdrops': (
        'airdrop', 'airdrops', 'claim', 'claiming', 'whitelist', 'wl',
        'allowlist', 'al', 'free mint', 'giveaway', 'drop', 'snapshot',
        'eligible', 'eligibility', 'retroactive', 'retro', 'allocation',
        'points', 'season', 'epoch', 'quest', 'testnet', 'incentive',
    ),
    'memes': (
        'meme', 'memes', 'memecoin', 'memecoins', 'doge', 'shib', 'pepe',
        'wojak', 'frog', 'dog', 'cat', 'wen', 'wagmi', 'ngmi', 'gm',
        'ser', 'fren', 'based', 'rekt', 'ape', 'apeing', 'degen',
        'pump', 'pumping', 'moon', 'mooning', 'diamond hands', 'paper hands',
        'hodl', 'fomo', 'fud', 'copium', 'hopium', 'bonk', 'wif',
    ),
    'trading': (
        'trading', 'trade', 'long', 'short', 'leverage', 'perp', 'perps',
        'perpetual', 'futures', 'options', 'spot', 'margin', 'liquidation',
        'liquidated', 'position', 'entry', 'exit', 'stop loss', 'take profit',
        'tp', 'sl', 'rsi', 'macd', 'ema', 'support', 'resistance',
        'breakout', 'breakdown', 'bullish', 'bearish', 'ta', 'chart',
        'pattern', 'candle', 'wick', 'volume', 'orderbook', 'bid', 'ask',
    ),
    'gaming': (
        'gaming', 'game', 'games', 'gamefi', 'play to earn', 'p2e',
        'metaverse', 'virtual world', 'avatar', 'in-game', 'guild',
        'esports', 'steam', 'epic', 'xbox', 'playstation', 'nintendo',
        'mobile gaming', 'web3 gaming', 'blockchain game', 'axie',
        'sandbox', 'decentraland', 'immutable', 'gala', 'illuvium',
    ),
    'crypto': (
        'crypto', 'cryptocurrency', 'bitcoin', 'btc', 'ethereum', 'eth',
        'blockchain', 'web3', 'decentralized', 'token', 'coin', 'wallet',
        'address', 'transaction', 'hash', 'block', 'chain', 'network',
        'mainnet', 'layer', 'l1', 'l2', 'rollup', 'bridge', 'cross-chain',
        'solana', 'sol', 'polygon', 'matic', 'avalanche', 'avax',
        'binance', 'bnb', 'coinbase', 'exchange', 'cex', 'self-custody',
    ),
})

TOPIC_LABELS = MappingProxyType({
    'ai': 'AI & ML',
    'defi': 'DeFi',
    'nfts': 'NFTs',
    'news': 'News',
    'macro': 'Macro',
    'airdrops': 'Airdrops',
    'memes': 'Memes',
    'trading': 'Trading',
    'gaming': 'Gaming',
    'crypto': 'Crypto',
})

SHORT_KEYWORD_MAX_LENGTH = 3


def _compile_topic_matchers() -> Dict[str, Tuple[Pattern, Tuple[str, ...]]]:
    matchers = {}
    for topic in PROFILE_TOPICS:
        short = [kw for kw in TOPIC_KEYWORDS[topic] if len(kw) <= SHORT_KEYWORD_MAX_LENGTH]
        long_keywords = tuple(kw for kw in TOPIC_KEYWORDS[topic] if len(kw) > SHORT_KEYWORD_MAX_LENGTH)
        pattern = re.compile(r'\b(?:' + '|'.join(re.escape(kw) for kw in short) + r')\b')
        matchers[topic] = (pattern, long_keywords)
    return matchers


_TOPIC_MATCHERS = MappingProxyType(_compile_topic_matchers())


def classify_topics(text: str) -> FrozenSet[str]:
    """
    Return every topic whose keyword list matches the text.

    Examples:
        >>> sorted(classify_topics("Fed rate cut could pump BTC"))
        ['crypto', 'macro', 'memes']
    """
    if not text:
        return frozenset()

    lowered = text.lower()
    matched = set()
    for topic, (short_pattern, long_keywords) in _TOPIC_MATCHERS.items():
        if short_pattern.search(lowered) or any(kw in lowered for kw in long_keywords):
            matched.add(topic)
    return frozenset(matched)


def topic_engagement_weight(record: ContentRecord) -> float:
    """1 for an unengaged post, growing logarithmically with engagement."""
    engagement = record.likes + record.reshares * 2 + record.replies * 3
    return 1 + math.log10(1 + engagement / 10)


def compute_topic_scores(records: Iterable[ContentRecord]) -> List[TopicScore]:
    """
    Engagement-weighted topic affinity for a body of content.

    Scores are normalized 0-100 against the strongest topic and returned
    strongest first. Topics with no matches are included with score 0.
    """
    counts = {topic: 0 for topic in PROFILE_TOPICS}
    weighted = {topic: 0.0 for topic in PROFILE_TOPICS}

    for record in records:
        topics = classify_topics(record.text)
        if not topics:
            continue
        weight = topic_engagement_weight(record)
        for topic in topics:
            counts[topic] += 1
            weighted[topic] += weight

    max_weighted = max(max(weighted.values()), 1.0)

    results = [
        TopicScore(
            topic=topic,
            score=int(round(weighted[topic] / max_weighted * 100)),
            content_count=counts[topic],
            weighted_score=round(weighted[topic], 2),
        )
        for topic in PROFILE_TOPICS
    ]
    results.sort(key=lambda s: s.score, reverse=True)
    return results
