# Initial schema: clients, catalog, orders, payments and points ledger

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="email")),
                (
                    "document",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="CPF (apenas números)",
                        max_length=20,
                        verbose_name="documento",
                    ),
                ),
                (
                    "points_balance",
                    models.IntegerField(
                        default=0,
                        help_text="Cache do saldo do extrato de pontos",
                        verbose_name="saldo de pontos",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="ativo")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
            ],
            options={
                "verbose_name": "cliente",
                "verbose_name_plural": "clientes",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("points_balance__gte", 0)),
                        name="fidelman_client_points_balance_gte_0",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Establishment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("description", models.TextField(blank=True, verbose_name="descrição")),
                (
                    "category",
                    models.CharField(blank=True, db_index=True, max_length=100, verbose_name="categoria"),
                ),
                ("address", models.CharField(blank=True, max_length=255, verbose_name="endereço")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                (
                    "owner",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="owned_establishment",
                        to="fidelman.client",
                        verbose_name="proprietário",
                    ),
                ),
            ],
            options={
                "verbose_name": "estabelecimento",
                "verbose_name_plural": "estabelecimentos",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("description", models.TextField(blank=True, verbose_name="descrição")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="preço")),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Somente produtos ativos podem ser pedidos",
                        verbose_name="ativo",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "establishment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="fidelman.establishment",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "produto",
                "verbose_name_plural": "produtos",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["establishment", "is_active"],
                        name="fidelman_product_estab_active",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pendente"),
                            ("confirmed", "Confirmado"),
                            ("preparing", "Em preparo"),
                            ("ready", "Pronto"),
                            ("completed", "Concluído"),
                            ("cancelled", "Cancelado"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(decimal_places=2, max_digits=12, verbose_name="valor total"),
                ),
                (
                    "points_generated",
                    models.PositiveIntegerField(
                        help_text="Calculado na criação, nunca recalculado",
                        verbose_name="pontos gerados",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="fidelman.client",
                        verbose_name="cliente",
                    ),
                ),
                (
                    "establishment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="fidelman.establishment",
                        verbose_name="estabelecimento",
                    ),
                ),
            ],
            options={
                "verbose_name": "pedido",
                "verbose_name_plural": "pedidos",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["client", "-created_at"],
                        name="fidelman_order_client_created",
                    ),
                    models.Index(
                        fields=["establishment", "-created_at"],
                        name="fidelman_order_estab_created",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("quantity", models.PositiveIntegerField(verbose_name="quantidade")),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Preço do produto no momento do pedido",
                        max_digits=10,
                        verbose_name="preço unitário",
                    ),
                ),
                (
                    "total_price",
                    models.DecimalField(decimal_places=2, max_digits=12, verbose_name="total da linha"),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="fidelman.order",
                        verbose_name="pedido",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_items",
                        to="fidelman.product",
                        verbose_name="produto",
                    ),
                ),
            ],
            options={
                "verbose_name": "item do pedido",
                "verbose_name_plural": "itens do pedido",
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 1)),
                        name="fidelman_orderitem_quantity_gte_1",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="valor")),
                (
                    "method",
                    models.CharField(
                        help_text="Ex: pix, credit_card",
                        max_length=50,
                        verbose_name="forma de pagamento",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pendente"),
                            ("settled", "Liquidado"),
                            ("failed", "Falhou"),
                        ],
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "transaction_id",
                    models.CharField(max_length=100, unique=True, verbose_name="id da transação"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="fidelman.client",
                        verbose_name="cliente",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="fidelman.order",
                        verbose_name="pedido",
                    ),
                ),
            ],
            options={
                "verbose_name": "pagamento",
                "verbose_name_plural": "pagamentos",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PointsTransaction",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "points",
                    models.PositiveIntegerField(
                        help_text="Magnitude; o sinal vem do tipo",
                        verbose_name="pontos",
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[("gain", "Acúmulo"), ("loss", "Resgate")],
                        max_length=10,
                        verbose_name="tipo",
                    ),
                ),
                (
                    "balance_after",
                    models.IntegerField(
                        help_text="Saldo de pontos do cliente após esta transação",
                        verbose_name="saldo após",
                    ),
                ),
                (
                    "description",
                    models.CharField(blank=True, max_length=200, verbose_name="descrição"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="criado em"),
                ),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="points_transactions",
                        to="fidelman.client",
                        verbose_name="cliente",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="points_transactions",
                        to="fidelman.order",
                        verbose_name="pedido",
                    ),
                ),
            ],
            options={
                "verbose_name": "transação de pontos",
                "verbose_name_plural": "transações de pontos",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["client", "-created_at"],
                        name="fidelman_points_client_created",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("type", "gain")),
                        fields=("order",),
                        name="fidelman_points_one_gain_per_order",
                    )
                ],
            },
        ),
    ]
