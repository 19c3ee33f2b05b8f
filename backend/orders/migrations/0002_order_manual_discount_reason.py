from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="manual_discount_reason",
            field=models.CharField(
                blank=True,
                help_text="Reason given with the manual discount; kept while bundle savings come and go.",
                max_length=255,
            ),
        ),
    ]
